from fastapi import APIRouter, Depends, status

from src.app.provisioning.orchestrator import ProvisioningOrchestrator
from src.app.services.template_registry import ITemplateRegistry
from src.depends import get_orchestrator, get_template_registry

router = APIRouter()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health(
    template_registry: ITemplateRegistry = Depends(get_template_registry),
    orchestrator: ProvisioningOrchestrator = Depends(get_orchestrator),
):
    return {
        "status": "ok",
        "templates": len(template_registry.list_templates()),
        "activeJobs": len(orchestrator.active_jobs()),
    }
