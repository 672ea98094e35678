"""
HTTP implementation of the category action contract

Lets the board run against a remote Finance Categories service.
Transport failures and malformed responses come back as the generic
failure envelope; only ``list`` raises.
"""

import logging
from typing import Any, List, Optional, Type

import httpx
from pydantic import BaseModel, ValidationError

from finance_categories.models.category import CategoryType
from finance_categories.schemas.category import (
    ActionResult,
    CategoryResponse,
    SeedDefaultsResult,
)
from finance_categories.services.category_actions import UNEXPECTED_ERROR

logger = logging.getLogger(__name__)

CODE_BY_STATUS = {
    404: "not_found",
    409: "conflict",
    422: "validation",
}


class HttpCategoryActions:
    """
    Category actions over HTTP

    Usage:
        async with httpx.AsyncClient(base_url="http://localhost:8000") as client:
            actions = HttpCategoryActions(client, user_id="...")
            result = await actions.create({...})
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_id: str,
        base_path: str = "/api/v1/categories"
    ):
        self.client = client
        self.user_id = user_id
        self.base_path = base_path.rstrip("/")

    @property
    def headers(self):
        return {"X-User-Id": self.user_id}

    async def list(self, category_type: Optional[CategoryType] = None) -> List[CategoryResponse]:
        """
        Raises:
            httpx.HTTPError: on transport failure or error status
        """
        params = {"type": CategoryType(category_type).value} if category_type else None
        response = await self.client.get(f"{self.base_path}/", params=params, headers=self.headers)
        response.raise_for_status()
        return [CategoryResponse.model_validate(item) for item in response.json()]

    async def get(self, category_id: str) -> ActionResult[CategoryResponse]:
        model = ActionResult[CategoryResponse]
        try:
            response = await self.client.get(f"{self.base_path}/{category_id}", headers=self.headers)
        except httpx.RequestError as e:
            logger.error(f"Network error fetching category {category_id}: {e}")
            return model.fail(UNEXPECTED_ERROR, code="unexpected")
        if response.is_success:
            return model.ok(CategoryResponse.model_validate(response.json()))
        return self._failure(model, response)

    async def create(self, payload: Any) -> ActionResult[CategoryResponse]:
        return await self._send("POST", f"{self.base_path}/", ActionResult[CategoryResponse], payload)

    async def update(self, category_id: str, payload: Any) -> ActionResult[CategoryResponse]:
        return await self._send(
            "PUT", f"{self.base_path}/{category_id}", ActionResult[CategoryResponse], payload
        )

    async def delete(self, category_id: str) -> ActionResult[None]:
        return await self._send("DELETE", f"{self.base_path}/{category_id}", ActionResult[None])

    async def seed_defaults(self) -> SeedDefaultsResult:
        return await self._send("POST", f"{self.base_path}/defaults", SeedDefaultsResult)

    async def _send(self, method: str, url: str, model: Type[BaseModel], payload: Any = None):
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json", by_alias=True)

        try:
            response = await self.client.request(method, url, json=payload, headers=self.headers)
        except httpx.RequestError as e:
            logger.error(f"Network error on {method} {url}: {e}")
            return model(success=False, error=UNEXPECTED_ERROR, code="unexpected")

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Non-JSON response on {method} {url}: {response.status_code}")
            return model(success=False, error=UNEXPECTED_ERROR, code="unexpected")

        if isinstance(body, dict) and "success" in body:
            try:
                return model.model_validate(body)
            except ValidationError as e:
                logger.error(f"Malformed envelope on {method} {url}: {e}")
                return model(success=False, error=UNEXPECTED_ERROR, code="unexpected")
        return self._failure(model, response)

    @staticmethod
    def _failure(model: Type[BaseModel], response: httpx.Response):
        """Envelope for error responses that carry FastAPI's {"detail": ...}"""
        try:
            detail = response.json().get("detail")
        except (ValueError, AttributeError):
            detail = None
        error = detail if isinstance(detail, str) else UNEXPECTED_ERROR
        code = CODE_BY_STATUS.get(response.status_code, "unexpected")
        logger.warning(f"Category request failed with {response.status_code}: {error}")
        return model(success=False, error=error, code=code)
