"""
FastAPI routes for uploading a transaction export and viewing the analysis.
Thin layer over AnalysisService: upload checks, temp file handling, rendering.
"""
import uuid
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from core.config import get_settings
from core.exceptions import PartnershipAnalyzerError, UploadValidationError
from core.exporters import create_output_filename, export_to_excel
from core.formatting import describe_settlement, format_bytes, format_currency
from core.logger import setup_logger
from core.normalize import parse_amount
from core.schema import AnalysisResult, Party, PriorBalances
from services.analysis_service import AnalysisService

logger = setup_logger(__name__)
settings = get_settings()

ALLOWED_EXTENSIONS = (".csv",)

# Initialize FastAPI app
app = FastAPI(
    title="Partnership Ledger Analyzer",
    description="Summaries and settlement for a two-partner transaction export",
    version="1.0.0"
)

# Setup templates
templates_dir = Path(__file__).parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))
templates.env.filters["currency"] = lambda amount: format_currency(amount, settings.currency_symbol)
templates.env.filters["filesize"] = format_bytes


def validate_upload(filename: Optional[str], size: int) -> None:
    """
    Check the upload's extension and size.

    Args:
        filename: Client supplied file name
        size: Upload size in bytes

    Raises:
        UploadValidationError: If the file is not a CSV or is too large
    """
    if not filename or not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise UploadValidationError(
            "Please upload a valid CSV file.",
            details={"filename": filename}
        )
    if size > settings.max_upload_bytes:
        raise UploadValidationError(
            f"File size exceeds {settings.max_upload_mb}MB limit.",
            details={"filename": filename, "size": size}
        )


def parse_prior_balances(party_a: str, party_b: str, shared: str) -> PriorBalances:
    """Form values are lenient: commas stripped, blanks and junk become 0."""
    return PriorBalances(
        party_a=parse_amount(party_a),
        party_b=parse_amount(party_b),
        shared=parse_amount(shared),
    )


async def analyze_upload(
    csv_file: UploadFile,
    prior_balances: PriorBalances
) -> Tuple[AnalysisResult, Dict[str, Any]]:
    """
    Validate and store the upload, run the analysis, remove the temp file.

    Returns:
        (analysis result, file info for display)
    """
    content = await csv_file.read()
    validate_upload(csv_file.filename, len(content))

    settings.ensure_directories()
    upload_path = Path(settings.temp_storage_path) / f"{uuid.uuid4()}.csv"

    try:
        with open(upload_path, "wb") as f:
            f.write(content)

        result = AnalysisService().analyze_file(upload_path, prior_balances)
    finally:
        try:
            if upload_path.exists():
                upload_path.unlink()
                logger.debug(f"Cleaned up: {upload_path}")
        except OSError as cleanup_error:
            logger.warning(f"Failed to cleanup {upload_path}: {cleanup_error}")

    file_info = {
        "name": csv_file.filename,
        "size": len(content),
        "rows": len(result.transactions),
    }
    return result, file_info


def error_payload(error: PartnershipAnalyzerError) -> Dict[str, Any]:
    return {"error": error.message, "details": error.details}


def render_page(request: Request, status_code: int = 200, **context: Any) -> HTMLResponse:
    codes = settings.party_codes()
    result: Optional[AnalysisResult] = context.get("result")
    page_context = {
        "app_name": settings.app_name,
        "codes": codes,
        "parties": list(Party),
        "max_upload_mb": settings.max_upload_mb,
        "form": context.pop("form", {}),
        "settlement_text": describe_settlement(result.settlement, codes) if result else None,
        **context,
    }
    return templates.TemplateResponse(request, "index.html", page_context, status_code=status_code)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Render upload form."""
    return render_page(request)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "partnership_ledger",
        "version": "1.0.0"
    }


@app.get("/favicon.ico")
async def favicon():
    """Return empty response for favicon to avoid 404 errors."""
    return Response(status_code=204)


@app.post("/analyze", response_class=HTMLResponse)
async def analyze_page(
    request: Request,
    csv_file: UploadFile = File(...),
    prev_balance_a: str = Form(""),
    prev_balance_b: str = Form(""),
    prev_balance_shared: str = Form(""),
):
    """Analyse an uploaded CSV and render the report."""
    form = {
        "prev_balance_a": prev_balance_a,
        "prev_balance_b": prev_balance_b,
        "prev_balance_shared": prev_balance_shared,
    }
    prior_balances = parse_prior_balances(prev_balance_a, prev_balance_b, prev_balance_shared)
    logger.info(f"Received file for report: {csv_file.filename}")

    try:
        result, file_info = await analyze_upload(csv_file, prior_balances)
    except PartnershipAnalyzerError as e:
        logger.warning(f"Analysis failed for {csv_file.filename}: {e.message}")
        return render_page(request, status_code=400, form=form, error=e.message)

    return render_page(
        request,
        form=form,
        result=result,
        file_info=file_info,
        success="File uploaded and processed successfully!",
    )


@app.post("/api/analyze")
async def analyze_json(
    csv_file: UploadFile = File(...),
    prev_balance_a: str = Form(""),
    prev_balance_b: str = Form(""),
    prev_balance_shared: str = Form(""),
):
    """Analyse an uploaded CSV and return the result as JSON."""
    prior_balances = parse_prior_balances(prev_balance_a, prev_balance_b, prev_balance_shared)
    logger.info(f"Received file for JSON analysis: {csv_file.filename}")

    try:
        result, file_info = await analyze_upload(csv_file, prior_balances)
    except PartnershipAnalyzerError as e:
        logger.warning(f"Analysis failed for {csv_file.filename}: {e.message}")
        return JSONResponse(status_code=400, content=error_payload(e))

    return {
        "file": file_info,
        "party_codes": settings.party_codes().as_dict(),
        "settlement_text": describe_settlement(result.settlement, settings.party_codes()),
        "result": result.model_dump(mode="json"),
    }


@app.post("/api/export")
async def export_excel(
    csv_file: UploadFile = File(...),
    prev_balance_a: str = Form(""),
    prev_balance_b: str = Form(""),
    prev_balance_shared: str = Form(""),
):
    """Analyse an uploaded CSV and return the classified transactions as .xlsx."""
    prior_balances = parse_prior_balances(prev_balance_a, prev_balance_b, prev_balance_shared)

    try:
        result, _ = await analyze_upload(csv_file, prior_balances)
        content = export_to_excel(result, settings.party_codes())
    except PartnershipAnalyzerError as e:
        logger.warning(f"Export failed for {csv_file.filename}: {e.message}")
        return JSONResponse(status_code=400, content=error_payload(e))

    filename = create_output_filename()
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
