"""
Color-based product search engine.

Orchestrates the search pipeline:
    1. Obtain uploaded colors (local analysis of an uploaded file or an
       image URL, or a vision-API annotation), truncated to
       MAX_UPLOADED_COLORS
    2. Score every catalog product against those colors
    3. Rank by score and keep the top results

The engine owns no global state: it is constructed with a Catalog
snapshot and never modifies it.
"""

import base64
import logging
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Sequence

from .analyzer import (
    MAX_UPLOADED_COLORS, analyze_image, analyze_url, parse_vision_annotation,
)
from .catalog import Catalog
from .colors import sanitize_color
from .scoring import COLORS_COMPARED, DEFAULT_TOP_K, compute_similarity_score, rank_results
from .validation import validate_image_url, validate_upload

logger = logging.getLogger(__name__)


class SearchEngine:
    """
    Ranks a product catalog by color similarity to an uploaded image.
    """

    def __init__(self, catalog: Catalog, top_k: int = DEFAULT_TOP_K):
        """
        Args:
            catalog: Read-only product snapshot to search.
            top_k: Default maximum number of results per search.
        """
        self.catalog = catalog
        self.top_k = top_k
        logger.info(f"Search engine ready: {len(catalog)} products")

    def search(self,
               uploaded_colors: Sequence[Dict],
               top_k: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Score and rank the catalog against a list of uploaded colors.

        Args:
            uploaded_colors: Colors from the query image. Only the first
                MAX_UPLOADED_COLORS are used.
            top_k: Maximum number of results. Defaults to self.top_k.

        Returns:
            List of product dicts sorted by score, each with an added
            'score' (rounded to 2 decimals) and 'matching_colors' (the
            first 3 uploaded colors).
        """
        top_k = self.top_k if top_k is None else top_k
        colors = [sanitize_color(c) for c in list(uploaded_colors)[:MAX_UPLOADED_COLORS]]
        matching = colors[:COLORS_COMPARED]

        results = []
        for product in self.catalog:
            score = compute_similarity_score(colors, product)
            results.append({
                **product,
                "score": round(score, 2),
                "matching_colors": [dict(c) for c in matching],
            })

        results = rank_results(results, top_k)

        for rank, result in enumerate(results[:3], start=1):
            logger.info(
                f"{rank}. {result['name']} ({result['category']}) - "
                f"Score: {result['score']:.2f}"
            )
        logger.info(
            f"Search complete: {len(self.catalog)} products scored -> "
            f"{len(results)} results"
        )

        return results

    def _respond(self,
                 colors: List[Dict],
                 top_k: Optional[int],
                 uploaded_image: Optional[str] = None) -> Dict[str, Any]:
        results = self.search(colors, top_k)
        return {
            "success": True,
            "results": results,
            "dominant_colors": [sanitize_color(c) for c in colors[:COLORS_COMPARED]],
            "uploaded_image": uploaded_image,
        }

    def search_image(self,
                     data: bytes,
                     mimetype: str,
                     top_k: Optional[int] = None) -> Dict[str, Any]:
        """
        Search with an uploaded image file.

        The response echoes the upload as a base64 data URL in
        'uploaded_image'.

        Raises:
            UploadError: If the upload is not an image or is too large.
        """
        validate_upload(data, mimetype)
        colors = analyze_image(data)
        logger.info(f"Uploaded image colors: {colors}")
        data_url = f"data:{mimetype};base64,{base64.b64encode(data).decode('ascii')}"
        return self._respond(colors, top_k, data_url)

    def search_url(self,
                   url: str,
                   top_k: Optional[int] = None) -> Dict[str, Any]:
        """
        Search with an image URL on one of the allowed image hosts.

        Raises:
            UploadError: If the URL host is not allowed.
        """
        validate_image_url(url)
        colors = analyze_url(url)
        logger.info(f"URL image colors: {colors}")
        return self._respond(colors, top_k, url)

    def search_annotation(self,
                          annotation: Optional[Dict],
                          top_k: Optional[int] = None) -> Dict[str, Any]:
        """Search with a vision-API image properties annotation."""
        colors = parse_vision_annotation(annotation)
        logger.info(f"Annotation colors: {colors}")
        return self._respond(colors, top_k)

    def products(self) -> List[Dict]:
        """All catalog products."""
        return list(self.catalog)

    def health(self) -> Dict[str, Any]:
        """Status summary for health checks."""
        return {
            "status": "OK",
            "products": len(self.catalog),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
