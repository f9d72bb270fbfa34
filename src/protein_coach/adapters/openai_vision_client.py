"""OpenAI Responses API client for meal photo analysis."""

from dataclasses import dataclass

from openai import APIStatusError, AsyncOpenAI, OpenAIError

from protein_coach.errors import InferenceError
from protein_coach.services.vision import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIVisionClient":
        """Create an OpenAI vision client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        instruction: str,
        hint: str,
        image_data_url: str,
    ) -> str:
        """Call OpenAI Responses API and return the output text."""
        request_payload: dict[str, object] = {
            "model": model,
            "temperature": temperature,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": instruction},
                        {"type": "input_text", "text": hint},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
        }
        try:
            response = await self.client.responses.create(**request_payload)
        except APIStatusError as exc:
            raise InferenceError(
                f"OpenAI error {exc.status_code}: {exc.message}"
            ) from exc
        except OpenAIError as exc:
            raise InferenceError(f"OpenAI request failed: {exc}") from exc
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
