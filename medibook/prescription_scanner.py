"""Prescription image scanning using OpenAI vision and fuzzy name matching."""

import base64
import difflib
import json
import logging
import re
import uuid
from pathlib import Path

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from medibook import config
from medibook.errors import ScanError
from medibook.hospital.database.medicine_repository import Medicine

logger = logging.getLogger(__name__)


class ExtractedPrescription(BaseModel):
    """Text the vision model read from a prescription image."""

    text: str = Field("", description="All legible text on the prescription, in reading order")
    medicine_names: list[str] = Field(
        default_factory=list, description="Medicine names written on the prescription"
    )


class ScanResult(BaseModel):
    extracted_text: str
    matched_medicines: list[dict]


EXTRACTION_PROMPT = """You are reading a photographed or scanned medical prescription.

Transcribe the prescription and list the medicine names on it. Do not guess
names you cannot read.

Return a JSON object with EXACTLY these fields:
{
  "text": "all legible text, in reading order",
  "medicine_names": ["each medicine name as written"]
}"""


def clean_text(text: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    text = re.sub(r"[^a-z0-9\s]", " ", text.lower())
    return re.sub(r"\s+", " ", text).strip()


def match_medicines(
    text: str,
    medicines: list[Medicine],
    cutoff: float = config.SCAN_MATCH_CUTOFF,
) -> list[Medicine]:
    """Catalogue medicines whose name appears in text, exactly or approximately."""
    cleaned = clean_text(text)
    words = cleaned.split()

    matched = []
    seen = set()
    for medicine in medicines:
        name = clean_text(medicine.name)
        if not name or name in seen:
            continue

        exact = re.search(rf"\b{re.escape(name)}\b", cleaned)
        if exact or difflib.get_close_matches(name, words, n=1, cutoff=cutoff):
            matched.append(medicine)
            seen.add(name)

    return matched


def store_upload(data: bytes, filename: str, upload_dir: Path | None = None) -> str:
    """Save an uploaded file to local storage and return its public URL."""
    upload_dir = upload_dir or config.UPLOAD_DIR
    upload_dir.mkdir(parents=True, exist_ok=True)

    suffix = Path(filename or "").suffix.lower()
    stored_name = f"{uuid.uuid4().hex}{suffix}"
    (upload_dir / stored_name).write_bytes(data)
    return f"/uploads/{stored_name}"


class PrescriptionScanner:
    """Reads prescription images and matches them against the catalogue."""

    def __init__(self, client: OpenAI | None = None, model: str | None = None):
        self._client = client
        self.model = model or config.LLM_MODEL

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not config.OPENAI_API_KEY:
                raise ScanError("OPENAI_API_KEY environment variable not set")
            self._client = OpenAI(api_key=config.OPENAI_API_KEY)
        return self._client

    def extract(self, image: bytes, media_type: str = "image/png") -> ExtractedPrescription:
        """Extract prescription text from an image."""
        if not image:
            raise ScanError("Image cannot be empty")

        data_url = f"data:{media_type};base64,{base64.b64encode(image).decode('ascii')}"
        messages = [
            {"role": "system", "content": EXTRACTION_PROMPT},
            {
                "role": "user",
                "content": [{"type": "image_url", "image_url": {"url": data_url}}],
            },
        ]

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            logger.exception("Prescription extraction request failed")
            raise ScanError("Failed to process image") from exc

        try:
            data = json.loads(response.choices[0].message.content)
            return ExtractedPrescription(**data)
        except (json.JSONDecodeError, TypeError, PydanticValidationError) as exc:
            logger.error("Unexpected extraction response: %r", response.choices[0].message.content)
            raise ScanError("Failed to process image") from exc

    def scan(
        self,
        image: bytes,
        medicines: list[Medicine],
        media_type: str = "image/png",
    ) -> ScanResult:
        """Extract text from an image and return the catalogue medicines it names."""
        extracted = self.extract(image, media_type)
        searchable = " ".join([extracted.text, *extracted.medicine_names])
        matched = match_medicines(searchable, medicines)

        logger.info("Prescription scan matched %d medicine(s)", len(matched))
        return ScanResult(
            extracted_text=extracted.text,
            matched_medicines=[
                {"id": m.id, "name": m.name, "price": m.price, "category": m.category}
                for m in matched
            ],
        )
