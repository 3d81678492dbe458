# itda/api/chat.py
"""
상담 챗봇 API (인물 기록 없이 1회 응답)

이 라우터의 오류 응답은 모두 {"error": ...} 형태
"""

from typing import Callable

from fastapi import APIRouter, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from itda.chains.counsel_chain import counsel_chain
from itda.errors import InputInvalid
from itda.schemas.counsel_schemas import ChatRequest, ChatResponse
from itda.utils.logger import logger
from itda.utils.messages import get_message


class ChatRoute(APIRoute):
    """요청 본문 검증 실패(422)를 400 {"error"} 로 변환"""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def chat_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except RequestValidationError as e:
                logger.warning(f" 채팅 요청 형식 오류: {e.errors()}")
                return JSONResponse(status_code=400, content={"error": get_message("input_invalid")})

        return chat_route_handler


router = APIRouter(tags=["chat"], route_class=ChatRoute)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest):
    """질문 + (선택) 대화 맥락 → RAG 상담 답변"""
    try:
        logger.info(f" 채팅 요청: message='{request.message[:30]}...'")

        result = await counsel_chain.answer(
            question=request.message,
            history_text=request.conversationContext or "",
        )
        return ChatResponse(reply=result.answer)

    except InputInvalid as e:
        return JSONResponse(status_code=400, content={"error": e.user_message()})
    except Exception as e:
        logger.error(f" 채팅 API 오류: {e}")
        return JSONResponse(status_code=500, content={"error": get_message("internal_error")})
