"""Extract fund unit prices from the daily PDF report with an OpenAI model."""

from __future__ import annotations

import base64
import logging
from typing import Any

from openai import OpenAI, OpenAIError

from config.funds import FundTable
from config.settings import OpenAIConfig
from models.errors import AuthenticationError, SourceFetchError
from models.schemas import Attachment

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
Analiza este PDF que contiene una tabla de rentabilidad de fondos.

IMPORTANTE: Solo extrae los datos de estos {count} fondos específicos y devuelve ÚNICAMENTE un array JSON sin comentarios ni descripciones adicionales:

Fondos a buscar con sus IDs:
{fund_lines}

Para cada fondo encontrado, extrae:
- La fecha del reporte (del título del documento)
- El valor de la unidad (columna "Valor de la Unidad")

Devuelve SOLO este formato JSON (sin texto adicional):
[
{example_lines}
]

IMPORTANTE:
- Usa los precios exactos de la columna "Valor de la Unidad"
- Usa la fecha exacta del título del documento en formato YYYY-MM-DD
- Devuelve solo el array JSON, sin explicaciones
- Si un fondo no se encuentra, omítelo del array
"""


def build_prompt(funds: FundTable) -> str:
    named = funds.named
    fund_lines = "\n".join(f'{i}. "{fund.name}" -> ID: "{fund.fund_id}"' for i, fund in enumerate(named, start=1))
    example_lines = ",\n".join(
        f'  {{ "idFund": "{fund.fund_id}", "date": "2025-06-18", "price": 1234.54 }}' for fund in named
    )
    return PROMPT_TEMPLATE.format(count=len(named), fund_lines=fund_lines, example_lines=example_lines)


class OpenAIReportExtractor:
    def __init__(self, config: OpenAIConfig, funds: FundTable, client: Any = None) -> None:
        if client is None:
            if not config.api_key:
                raise AuthenticationError("OPENAI_API_KEY is not configured")
            client = OpenAI(api_key=config.api_key)
        self.client = client
        self.model = config.model
        self.prompt = build_prompt(funds)

    def extract(self, attachment: Attachment) -> str:
        """Return the model's raw answer for one PDF attachment."""
        logger.info("Extracting %s with %s", attachment.filename, self.model)
        encoded = base64.b64encode(attachment.content).decode("ascii")
        try:
            response = self.client.responses.create(
                model=self.model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "input_file",
                                "filename": attachment.filename,
                                "file_data": f"data:application/pdf;base64,{encoded}",
                            },
                            {"type": "input_text", "text": self.prompt},
                        ],
                    }
                ],
            )
        except OpenAIError as exc:
            raise SourceFetchError(f"Extraction failed for {attachment.filename}: {exc}") from exc

        output = (response.output_text or "").strip()
        logger.debug("Model output for %s: %s", attachment.filename, output)
        return output
