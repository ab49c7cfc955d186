from __future__ import annotations

import logging
from typing import Any, Optional

from openai import OpenAI

from millennium.core.config import AppSettings
from millennium.core.formatting import format_currency, format_duration
from millennium.schemas.projection import ProjectionInput, ProjectionResult, RateBasis

logger = logging.getLogger(__name__)


class ProjectionAdvisor:
    """Short natural-language advice for a finished projection.

    The projection is only read here; whatever happens with the text service,
    callers get a string back.
    """

    def __init__(self, settings: AppSettings, client: Optional[Any] = None):
        self._settings = settings
        self._client = client
        if self._client is None and settings.openai_api_key:
            self._client = OpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.advisor_timeout_seconds,
            )

    @property
    def available(self) -> bool:
        return self._client is not None

    def build_prompt(self, inputs: ProjectionInput, result: ProjectionResult) -> str:
        basis = "ao ano" if inputs.rate_basis == RateBasis.ANNUAL else "ao mês"
        return (
            f"Analise: Capital {format_currency(inputs.initial_capital)}, "
            f"Aporte {format_currency(result.monthly_contribution)}, "
            f"Taxa {inputs.nominal_rate:g}% {basis}. "
            f"Resultado Final: {format_currency(result.final_total)}. "
            f"Meta de {format_currency(inputs.target)}: "
            f"{format_duration(result.target_reached_in_months)}. "
            "Dê um conselho financeiro muito curto."
        )

    def advise(self, inputs: ProjectionInput, result: ProjectionResult) -> str:
        fallback = self._settings.advisor_fallback_message
        if not self.available:
            logger.info("Advisor has no API client configured; using fallback message")
            return fallback

        prompt = self.build_prompt(inputs, result)
        try:
            response = self._client.responses.create(
                model=self._settings.advisor_model,
                input=prompt,
            )
            text = (getattr(response, "output_text", None) or "").strip()
        except Exception as exc:
            logger.warning("Advisor request failed, using fallback message: %s", exc)
            return fallback

        if not text:
            logger.warning("Advisor returned an empty response, using fallback message")
            return fallback
        return text
