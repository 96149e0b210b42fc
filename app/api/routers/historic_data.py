"""
app/api/routers/historic_data.py

Historic campaign / experiment import HTTP endpoints.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.dependencies import get_data_type, get_historic_upload
from app.domain.historic_records import ImportSummary
from app.ingestion.errors import IngestionError
from app.ingestion.file_reader import DataType, RawFile, parse_data_type
from app.schemas.historic_data import (
    HistoricDataListResponse,
    HistoricImportResponse,
    HistoricPreviewResponse,
    ProcessCampaignDataRequest,
    StoredCampaignResponse,
    StoredExperimentResponse,
    insights_response,
)
from app.services.historic_data_service import HistoricDataService, get_historic_data_service
from db.session import get_db

router = APIRouter(tags=["historic-data"])


@router.post("/process-campaign-data", response_model=HistoricImportResponse)
def process_campaign_data(
    payload: ProcessCampaignDataRequest,
    owner_id: uuid.UUID = Query(..., description="Account the records belong to"),
    db: Session = Depends(get_db),
    service: HistoricDataService = Depends(get_historic_data_service),
) -> HistoricImportResponse:
    """
    Import one base64-encoded campaign or experiment file.
    """

    try:
        data_type = parse_data_type(payload.data_type)
        raw_file = service.read_base64(
            file_content=payload.file_content,
            file_name=payload.file_name,
            file_type=payload.file_type,
        )
        summary = service.import_file(raw_file=raw_file, data_type=data_type, owner_id=owner_id, db=db)
    except IngestionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict()) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist historic data.",
        ) from exc

    return _import_response(summary)


@router.post("/upload-historic-data", response_model=HistoricImportResponse)
def upload_historic_data(
    file: UploadFile = Depends(get_historic_upload),
    data_type: DataType = Depends(get_data_type),
    owner_id: uuid.UUID = Query(..., description="Account the records belong to"),
    db: Session = Depends(get_db),
    service: HistoricDataService = Depends(get_historic_data_service),
) -> HistoricImportResponse:
    """
    Import one uploaded CSV, TSV or Excel file.
    """

    try:
        raw_file = _read_upload(file, service)
        summary = service.import_file(raw_file=raw_file, data_type=data_type, owner_id=owner_id, db=db)
    except IngestionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict()) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist historic data.",
        ) from exc
    finally:
        file.file.close()

    return _import_response(summary)


@router.post("/preview-historic-data", response_model=HistoricPreviewResponse)
def preview_historic_data(
    file: UploadFile = Depends(get_historic_upload),
    data_type: DataType = Depends(get_data_type),
    service: HistoricDataService = Depends(get_historic_data_service),
) -> HistoricPreviewResponse:
    """
    Parse and summarize an upload without storing anything.
    """

    try:
        result = service.preview(_read_upload(file, service), data_type)
    except IngestionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_dict()) from exc
    finally:
        file.file.close()

    return HistoricPreviewResponse(
        data_type=result.data_type.value,
        file_name=result.file_name,
        delimiter=result.delimiter,
        rows_parsed=result.rows_parsed,
        unmatched_columns=list(result.unmatched_columns),
        records=[record.to_dict() for record in result.records],
        insights=insights_response(result.insights),
    )


@router.get("/historic-data", response_model=HistoricDataListResponse)
def list_historic_data(
    owner_id: uuid.UUID = Query(..., description="Account the records belong to"),
    db: Session = Depends(get_db),
    service: HistoricDataService = Depends(get_historic_data_service),
) -> HistoricDataListResponse:
    try:
        stored = service.load_imported_data(owner_id=owner_id, db=db)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to load historic data.",
        ) from exc

    return HistoricDataListResponse(
        campaigns=[StoredCampaignResponse.model_validate(row) for row in stored.campaigns],
        experiments=[StoredExperimentResponse.model_validate(row) for row in stored.experiments],
        ready_for_generation=stored.ready_for_generation,
    )


def _read_upload(file: UploadFile, service: HistoricDataService) -> RawFile:
    return service.read_bytes(content=file.file.read(), file_name=file.filename or "")


def _import_response(summary: ImportSummary) -> HistoricImportResponse:
    return HistoricImportResponse(
        data_type=summary.data_type,
        processed=summary.processed,
        stored=summary.stored,
        errors=summary.errors,
        insights=insights_response(summary.insights),
        message=summary.message,
    )
