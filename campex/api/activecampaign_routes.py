"""CAMPEX — ActiveCampaign API Routes."""

from fastapi import APIRouter, HTTPException

from campex.connectors.activecampaign.client import (
    ActiveCampaignAPIError,
    ActiveCampaignClient,
)
from campex.core.logging import get_logger

logger = get_logger("api.activecampaign")

router = APIRouter(prefix="/activecampaign", tags=["ActiveCampaign"])


@router.get("/validate-token")
async def validate_token():
    """Check that the configured API token is accepted.

    Returns the authenticated user's name and email.
    """
    client = ActiveCampaignClient()
    try:
        result = await client.validate_token()
        return {
            "status": "success",
            "valid": result["valid"],
            "username": result["username"],
            "email": result["email"],
        }
    except ActiveCampaignAPIError as e:
        raise HTTPException(
            status_code=400, detail=f"Token validation failed: {str(e)}"
        )
    finally:
        await client.close()
