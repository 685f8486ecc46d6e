"""업로드 사진 → data URL 인코딩.

파일마다 독립적인 작업으로 스레드풀에서 처리한다.
- 정상: Pillow로 열어 최대 폭으로 축소 후 JPEG 재압축
- 압축 실패: 원본 바이트를 그대로 data URL로 (파일 단위 fallback)
- 이미지가 아닌 파일: 실패 결과로 보고하고 건너뜀
한 파일의 실패가 배치 전체를 막지 않는다.
"""

import asyncio
import base64
import io
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from loguru import logger
from PIL import Image

PLACEHOLDER_IMAGE = (
    "data:image/svg+xml;base64,"
    + base64.b64encode(
        b'<svg width="100" height="100" xmlns="http://www.w3.org/2000/svg">'
        b'<rect width="100" height="100" fill="#f4f4f4"/></svg>'
    ).decode()
)


@dataclass(frozen=True)
class EncodedImage:
    id: str
    name: str
    data: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "data": self.data}


@dataclass(frozen=True)
class EncodeResult:
    name: str
    image: EncodedImage | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None


@dataclass(frozen=True)
class RawUpload:
    name: str
    content_type: str
    content: bytes


def new_image_id() -> str:
    return uuid.uuid4().hex


def to_data_url(content: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode()}"


def compress(content: bytes, max_width: int = 800, quality: int = 60) -> str:
    """폭이 max_width보다 크면 비율을 유지해 줄이고 JPEG data URL로 반환한다."""
    image = Image.open(io.BytesIO(content)).convert("RGB")
    if image.width > max_width:
        height = round(image.height * max_width / image.width)
        image = image.resize((max_width, max(1, height)), Image.LANCZOS)

    buf = io.BytesIO()
    image.save(buf, "JPEG", quality=quality)
    return to_data_url(buf.getvalue(), "image/jpeg")


def encode_one(upload: RawUpload, max_width: int = 800, quality: int = 60) -> EncodeResult:
    if not upload.content_type.startswith("image/"):
        return EncodeResult(upload.name, error=f"이미지가 아닌 파일: {upload.content_type}")

    try:
        data = compress(upload.content, max_width, quality)
    except Exception as e:  # Pillow는 포맷마다 다른 예외를 던진다
        logger.warning(f"[image] {upload.name} 압축 실패, 원본 사용: {e}")
        data = to_data_url(upload.content, upload.content_type)

    return EncodeResult(upload.name, image=EncodedImage(new_image_id(), upload.name, data))


async def encode_uploads(
    uploads: list[RawUpload],
    max_width: int = 800,
    quality: int = 60,
    workers: int = 4,
) -> list[EncodeResult]:
    """run_in_executor로 파일별 인코딩을 스레드풀에 위임한다.

    결과 순서는 입력 순서와 같다. 파일 간 처리 순서는 보장하지 않는다.
    """
    if not uploads:
        return []

    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            loop.run_in_executor(pool, encode_one, upload, max_width, quality)
            for upload in uploads
        ]
        results = await asyncio.gather(*futures)

    return list(results)


def display_data(data: str | None) -> str:
    """예전 blob: URL이나 빈 데이터는 placeholder로 바꿔 보여준다."""
    if not data or data.startswith("blob:"):
        return PLACEHOLDER_IMAGE
    return data
