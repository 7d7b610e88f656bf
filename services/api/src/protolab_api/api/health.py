"""健康检查接口。"""

from fastapi import APIRouter, Depends, Request, status

from protolab_api.dependencies import get_workspace_store
from protolab_api.schemas.common import ErrorResponse
from protolab_api.schemas.responses import HealthResponse
from protolab_api.services.workspace_store import WorkspaceStore
from protolab_api.utils.response import success

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/live",
    summary="存活探针",
    description="用于容器编排系统检测服务进程是否存活。",
    status_code=status.HTTP_200_OK,
    response_model=HealthResponse,
    responses={500: {"model": ErrorResponse}},
)
def live(request: Request):
    """仅表示进程存活。"""
    return success(request, status="ok")


@router.get(
    "/ready",
    summary="就绪探针",
    description="返回内存仓库当前持有的工作空间数量。",
    status_code=status.HTTP_200_OK,
    response_model=HealthResponse,
    responses={500: {"model": ErrorResponse}},
)
def ready(request: Request, store: WorkspaceStore = Depends(get_workspace_store)):
    """内存仓库可读即视为就绪。"""
    return success(request, status="ready", workspaces=len(store))
