import logging

import uvicorn
from fastapi import FastAPI

from config.settings import SERVER_LOG_LEVEL, UVICORN_CONFIG
from server.api.rest.dependencies import shutdown_dependencies
from server.api.rest.errors import install_error_handlers
from server.api_router import api_router

logging.basicConfig(
    level=getattr(logging, str(SERVER_LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

# 初始化 FastAPI 应用
app = FastAPI(title="Streaming mini-app API", description="Catalog mirror and watch-state sync for the Telegram mini-app")

install_error_handlers(app)

# 添加路由
app.include_router(api_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.on_event("shutdown")
async def shutdown_event():
    """应用关闭时清理资源"""
    await shutdown_dependencies()


# 启动服务器
if __name__ == "__main__":
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
