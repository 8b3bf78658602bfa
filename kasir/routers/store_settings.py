# kasir/routers/store_settings.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from kasir.database import get_db
from kasir.models.app_settings import AppSettings
from kasir.schemas.app_settings import AppSettingsSchema

logger = logging.getLogger("kasir")

router = APIRouter(prefix="/settings", tags=["Settings"])

SETTINGS_ID = 1

DEFAULT_SETTINGS = AppSettingsSchema(
    store_name="E-Kasir",
    address="Jl. Jenderal Sudirman No. 1, Jakarta",
    phone="021-12345678",
    receipt_footer="Terima kasih atas kunjungan Anda!",
)


def load_settings(db: Session) -> AppSettingsSchema:
    record = db.query(AppSettings).filter(AppSettings.id == SETTINGS_ID).first()

    if record is None:
        return DEFAULT_SETTINGS.model_copy()

    return AppSettingsSchema.model_validate(record)


@router.get("", response_model=AppSettingsSchema)
def get_settings(db: Session = Depends(get_db)):
    return load_settings(db)


@router.put("", response_model=AppSettingsSchema)
def save_settings(
    settings_data: AppSettingsSchema,
    db: Session = Depends(get_db),
):
    record = db.query(AppSettings).filter(AppSettings.id == SETTINGS_ID).first()

    if record is None:
        record = AppSettings(id=SETTINGS_ID)
        db.add(record)

    # Overwritten wholesale
    for field, value in settings_data.model_dump().items():
        setattr(record, field, value)

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save settings: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to save settings",
        )

    logger.info(f"Settings saved for {settings_data.store_name}")

    return load_settings(db)
