import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import CORRELATION_ID_HEADER, SERVER_LOG_LEVEL, UVICORN_CONFIG
from server.api.rest.dependencies import shutdown_dependencies
from server.api_router import api_router
from server.middleware import correlation_id_middleware

logging.basicConfig(
    level=getattr(logging, str(SERVER_LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # 关闭时释放连接池
    await shutdown_dependencies()


# 初始化 FastAPI 应用
app = FastAPI(
    title="Conversation Memo API",
    description="会话备忘录与会话 fork 管理后端 API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应该限制具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[CORRELATION_ID_HEADER],
)
app.middleware("http")(correlation_id_middleware)

app.include_router(api_router)


if __name__ == "__main__":
    uvicorn.run("server.main:app", **UVICORN_CONFIG)
