from typing import Any, Dict, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from edgegrid_provider.client.session import Session
from edgegrid_provider.errors import ApiError

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ApiModel(BaseModel):
    """
    Base for request and response bodies.

    Fields are declared in snake_case and exchanged with the API in camelCase.
    Unknown response fields are kept so payload passthrough does not lose data.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    def to_body(self, exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """The JSON body for this model, without the path and query fields."""
        return self.model_dump(by_alias=True, exclude=set(exclude), exclude_none=True)


class HttpClient:
    """Shared plumbing of the per-API HTTP clients."""

    def __init__(self, session: Session):
        self.session = session

    def _get(
        self,
        path: str,
        response_model: Type[ResponseT],
        path_params: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
    ) -> ResponseT:
        body = self.session.send_request(
            "GET", path, path_params=path_params, query_params=query_params
        )
        return self._parse(response_model, body)

    def _write(
        self,
        method: str,
        path: str,
        response_model: Optional[Type[ResponseT]],
        data: Any = None,
        path_params: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
    ) -> Optional[ResponseT]:
        body = self.session.send_request(
            method,
            path,
            data=data,
            path_params=path_params,
            query_params=query_params,
        )
        if response_model is None:
            return None
        return self._parse(response_model, body)

    @staticmethod
    def _parse(response_model: Type[ResponseT], body: Any) -> ResponseT:
        if body is None:
            raise ApiError(
                f"expected a {response_model.__name__} document, got an empty response"
            )
        try:
            return response_model.model_validate(body)
        except ValueError as e:
            raise ApiError(f"unexpected {response_model.__name__} document: {e}")
