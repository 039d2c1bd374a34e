_BASE_PLAN = (
    "Create the basic project structure (src, public folders)",
    "Create the main entry file (src/app/page.tsx)",
    "Create the global layout (src/app/layout.tsx)",
    "Add a homepage component with hero section",
    "Set up Node.js + Express backend endpoint (e.g., /api/ping)",
    "Add project configuration files (package.json, tsconfig.json)",
    "Wire the IDE: file explorer, code editor, and right-side tabs",
)


def build_plan(idea: str) -> list[str]:
    """Fixed build plan, prefixed with the first words of the idea."""
    keywords = " ".join(idea.split()[:6])
    return [f"Understand requirements: {keywords} ...", *_BASE_PLAN]
