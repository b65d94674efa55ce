from fastapi import APIRouter

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check that the ATS Resume Checker API is up.")
async def health_check():
    return {"status": "OK", "message": "ATS Resume Checker API is running"}
