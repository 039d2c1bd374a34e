from fastapi import APIRouter, Depends

from builder_ide.api.dependencies import get_package_manager
from builder_ide.api.schemas import PackageRequest
from builder_ide.core.packages import PackageManager, PackageResult

router = APIRouter(prefix="/packages", tags=["packages"])


@router.post("/install", response_model=PackageResult)
async def install(
    body: PackageRequest,
    manager: PackageManager = Depends(get_package_manager),
) -> PackageResult:
    """Run ``npm install|uninstall <package>`` in the project root (bounded to two minutes by default)."""
    return await manager.run(body.package, body.action)
