"""Formation template and stateless chemistry endpoints."""

from fastapi import APIRouter, HTTPException, Request

from pitchside.api.payloads import ComputeChemistryRequest
from pitchside.config import settings
from pitchside.services.chemistry_service import ChemistryService

router = APIRouter(prefix="/api", tags=["formations"])


@router.get("/formations")
async def list_formations(request: Request):
    return {"formations": request.app.state.formation_repository.list_templates()}


@router.get("/formations/{template_id}")
async def get_formation(request: Request, template_id: str):
    formation = request.app.state.formation_repository.get_template(template_id, formation_id=template_id)
    if formation is None:
        raise HTTPException(status_code=404, detail=f"Formation template not found: {template_id}")
    return formation.to_dict()


@router.post("/chemistry")
async def compute_chemistry(body: ComputeChemistryRequest):
    """Score every bound pair of a formation without creating a board."""
    service = ChemistryService(body.chemistry.to_inputs(), rate=settings.familiarity_rate)
    return service.calculate_formation_chemistry(body.formation.to_formation()).to_dict()
