import json
import re
from pathlib import PurePosixPath
from typing import Any


def _component_name(file_name: str) -> str:
    stem = PurePosixPath(file_name).name.removesuffix(".tsx")
    name = re.sub(r"[^a-zA-Z0-9]", "", stem)
    return name[:1].upper() + name[1:]


def default_scaffold(file_name: str) -> str:
    """Starter content for a new file, chosen by extension."""
    if file_name.endswith(".tsx"):
        comp = _component_name(file_name)
        return f'export const {comp} = () => {{\n  return (<div className="p-4">{comp} component</div>);\n}};\n'
    if file_name.endswith(".ts"):
        return "export {}\n"
    if file_name.endswith(".js"):
        return "// new file\n"
    if file_name.endswith(".jsx"):
        return "export default function Component(){ return (<div>Component</div>) }\n"
    if file_name.endswith(".json"):
        return "{}\n"
    if file_name.endswith(".css"):
        return ":root{}\n"
    return "\n"


def slugify(project_name: str) -> str:
    return re.sub(r"\s+", "-", project_name.strip().lower())


def package_manifest(project_name: str) -> dict[str, Any]:
    return {
        "name": slugify(project_name),
        "version": "0.1.0",
        "private": True,
        "scripts": {
            "dev": "next dev --turbopack",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        },
        "dependencies": {
            "next": "15.3.5",
            "react": "^19.0.0",
            "react-dom": "^19.0.0",
        },
        "devDependencies": {
            "@types/node": "^20",
            "@types/react": "^19",
            "@types/react-dom": "^19",
            "typescript": "^5",
        },
    }


def package_manifest_json(project_name: str) -> str:
    return json.dumps(package_manifest(project_name), indent=2)


def readme(project_name: str) -> str:
    return (
        f"# {project_name}\n\n"
        "Generated project from The Smart Engineer for Full Integration.\n\n"
        "## Getting Started\n\n"
        "1. Install dependencies:\n```bash\nnpm install\n```\n\n"
        "2. Run the development server:\n```bash\nnpm run dev\n```\n\n"
        "3. Open [http://localhost:3000](http://localhost:3000) in your browser.\n"
    )
