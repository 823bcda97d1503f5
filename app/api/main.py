"""
CreditLens FastAPI 메인
"""

import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.api.routes import router
from app.config import settings

logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)

app = FastAPI(
    title="CreditLens",
    description="신용평가 관리자용 목록 조회 엔진 (필터/정렬/검색/페이지)",
    version="0.1.0",
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 프로덕션에서는 제한 필요
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """헬스 체크"""
    return {
        "name": "CreditLens",
        "status": "running",
        "version": "0.1.0",
    }


@app.get("/health")
async def health():
    """상세 헬스 체크"""
    return {
        "status": "healthy",
        "env": settings.ENV,
        "strict_operators": settings.STRICT_OPERATORS,
        "state_format_version": settings.STATE_FORMAT_VERSION,
    }
