"""API endpoint со списком поддерживаемых языков."""

from fastapi import APIRouter

from ..models import LANGUAGE_OPTIONS
from .schemas import LanguageOptionResponse

router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("", response_model=list[LanguageOptionResponse], summary="Поддерживаемые языки")
async def get_languages() -> list[LanguageOptionResponse]:
    """
    Языки для выбора в форме, по названию.

    Пример ответа:
    ```json
    [{"id": "c-sharp", "label": "C#"}, {"id": "c-plus-plus", "label": "C++"}, ...]
    ```
    """
    return [LanguageOptionResponse(id=id, label=label) for id, label in LANGUAGE_OPTIONS]
