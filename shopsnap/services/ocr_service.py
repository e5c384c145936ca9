"""
OCR Service - client for the external text recognition provider
"""

import logging
from typing import Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from shopsnap.errors import OCRProcessingError
from shopsnap.models import ShoppingItem
from shopsnap.services.capture import parse_ocr_result

logger = logging.getLogger(__name__)


class OCRService:
    """Posts images to an OCR endpoint and parses the recognized lines."""

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        backoff_factor: float = 2.0,
        user_agent: str = "ShopSnap/1.0",
        language: str = "eng",
    ):
        """
        Initialize the OCR client.

        Args:
            api_url: Endpoint accepting a multipart "image" upload
            api_key: Optional bearer token for the provider
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts
            backoff_factor: Exponential backoff factor
            user_agent: User-Agent header sent with every request
            language: Recognition language code
        """
        self.api_url = api_url
        self.timeout = timeout
        self.language = language

        # Configure session with retry strategy
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["POST"]
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        self.session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'application/json',
        })
        if api_key:
            self.session.headers['Authorization'] = f'Bearer {api_key}'

    @classmethod
    def from_config(cls, config) -> 'OCRService':
        return cls(
            api_url=config.get('OCR_API_URL'),
            api_key=config.get('OCR_API_KEY'),
            timeout=config.get('OCR_TIMEOUT', 30),
            max_retries=config.get('MAX_RETRIES', 3),
            backoff_factor=config.get('RETRY_BACKOFF_FACTOR', 2.0),
            user_agent=config.get('USER_AGENT', 'ShopSnap/1.0'),
            language=config.get('OCR_LANGUAGE', 'eng'),
        )

    def recognize(
        self,
        image: bytes,
        filename: str = "capture.jpg",
        content_type: str = "image/jpeg",
    ) -> Dict:
        """
        Send an image to the provider.

        Returns:
            Dict with "text" and "words" (list of word observations)

        Raises:
            OCRProcessingError: On transport errors or an unusable response
        """
        if not image:
            raise OCRProcessingError("empty image")

        try:
            response = self.session.post(
                self.api_url,
                files={'image': (filename, image, content_type)},
                data={'language': self.language},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error(f"OCR request failed: {e}")
            raise OCRProcessingError(str(e)) from e
        except ValueError as e:
            logger.error(f"OCR provider returned invalid JSON: {e}")
            raise OCRProcessingError("invalid response from OCR provider") from e

        if not isinstance(payload, dict) or not isinstance(payload.get('text'), str):
            raise OCRProcessingError("OCR response has no text")

        words = payload.get('words')
        return {
            'text': payload['text'],
            'words': words if isinstance(words, list) else [],
        }

    def process_image(
        self,
        image: bytes,
        filename: str = "capture.jpg",
        content_type: str = "image/jpeg",
    ) -> List[ShoppingItem]:
        """Recognize an image and turn its lines into shopping items."""
        result = self.recognize(image, filename, content_type)
        items = parse_ocr_result(result['text'], result['words'])
        logger.info(f"OCR produced {len(items)} items")
        return items
