"""UI preferences API controller. Writing handlers are sync and run in the threadpool."""

from fastapi import APIRouter, Body, Depends

from app.core.dependencies import get_ui_store
from app.domains.ui.service import UIStore
from app.schemas.base import ResponseSchema
from app.schemas.ui import UIPreferencesUpdate

router = APIRouter(
    prefix="/api/ui",
    tags=["ui"],
)


@router.get("/", response_model=ResponseSchema)
async def get_preferences(store: UIStore = Depends(get_ui_store)):
    """Get dashboard preferences."""

    return ResponseSchema(
        status="success",
        message="Preferences retrieved successfully",
        data=store.preferences.model_dump(by_alias=True),
    )


@router.patch("/", response_model=ResponseSchema)
def update_preferences(
    changes: UIPreferencesUpdate = Body(...),
    store: UIStore = Depends(get_ui_store),
):
    """Update dashboard preferences."""

    preferences = store.update(changes)

    return ResponseSchema(
        status="success",
        message="Preferences updated successfully",
        data=preferences.model_dump(by_alias=True),
    )


@router.post("/dark-mode/toggle", response_model=ResponseSchema)
def toggle_dark_mode(store: UIStore = Depends(get_ui_store)):
    """Flip the dark theme preference."""

    dark_mode = store.toggle_dark_mode()

    return ResponseSchema(
        status="success",
        message="Dark mode toggled",
        data={"darkMode": dark_mode},
    )
