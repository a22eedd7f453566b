# backend/insight/client.py

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from langchain_google_genai import ChatGoogleGenerativeAI

from masterdata.exceptions import UpstreamError

from .prompts import InsightContext, build_prompt

logger = logging.getLogger(__name__)

FALLBACK_TEXT = (
    "Maaf, terjadi kesalahan dalam memproses permintaan AI. Silakan coba lagi nanti."
)


@dataclass
class InsightResult:
    text: str
    kind: str
    error: Optional[UpstreamError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def default_llm() -> ChatGoogleGenerativeAI:
    if not settings.GEMINI_API_KEY:
        raise UpstreamError("GEMINI_API_KEY belum dikonfigurasi.")

    return ChatGoogleGenerativeAI(
        model=settings.GEMINI_MODEL,
        google_api_key=settings.GEMINI_API_KEY,
        temperature=0.7,
        top_k=40,
        top_p=0.95,
        max_output_tokens=2048,
    )


def generate_insight(role, context: InsightContext, llm=None) -> InsightResult:
    """
    Kirim satu permintaan ke Gemini dan kembalikan teks balasannya apa adanya.

    Kalau gagal (API key kosong, error jaringan, balasan kosong), error dicatat
    dan hasilnya berisi teks fallback. Tidak ada retry.
    """
    prompt = build_prompt(role, context)

    try:
        model = llm or default_llm()
        response = model.invoke(prompt)
        text = getattr(response, "content", response)
        if not isinstance(text, str) or not text:
            raise UpstreamError("Balasan AI kosong.")
    except Exception as exc:
        logger.exception("Insight request (%s) failed", context.kind)
        error = exc if isinstance(exc, UpstreamError) else UpstreamError(str(exc) or None)
        return InsightResult(text=FALLBACK_TEXT, kind=context.kind, error=error)

    logger.info("Insight request (%s) processed", context.kind)
    return InsightResult(text=text, kind=context.kind)
