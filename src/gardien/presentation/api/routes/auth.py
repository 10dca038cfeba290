"""
Sign-in challenge and verification API routes.
"""

from fastapi import APIRouter, Depends, status

from gardien.application.use_cases import (
    IssueChallengeUseCase,
    VerifySignedMessageUseCase,
)
from gardien.presentation.api.dependencies import (
    get_issue_challenge_use_case,
    get_verify_use_case,
)
from gardien.presentation.schemas import (
    ChallengeResponse,
    ErrorResponse,
    VerifyRequest,
    VerifyResponse,
)

router = APIRouter(tags=["Authentication"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@router.get(
    "/challenge",
    response_model=ChallengeResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def issue_challenge(
    use_case: IssueChallengeUseCase = Depends(get_issue_challenge_use_case),
) -> ChallengeResponse:
    """
    Issue a single-use challenge.

    The wallet embeds it in the message it signs, then posts the
    signed message to /verify.
    """
    issued = use_case.execute()
    return ChallengeResponse(nonce=issued.nonce)


@router.get(
    "/nonce",
    response_model=ChallengeResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
async def issue_nonce(
    use_case: IssueChallengeUseCase = Depends(get_issue_challenge_use_case),
) -> ChallengeResponse:
    """Alias of /challenge."""
    return await issue_challenge(use_case)


@router.post("/verify", response_model=VerifyResponse, responses=ERROR_RESPONSES)
async def verify_signed_message(
    request: VerifyRequest,
    use_case: VerifySignedMessageUseCase = Depends(get_verify_use_case),
) -> VerifyResponse:
    """
    Verify a signed message against an outstanding challenge.

    Flow:
    1. Extract the challenge from the message
    2. Consume it (single use, even if the signature turns out invalid)
    3. Verify the signature for the claimed address

    Returns:
        VerifyResponse with the authenticated address
    """
    result = await use_case.execute(
        address=request.address,
        message=request.message,
        signature=request.signature,
    )
    return VerifyResponse(address=result.address, timestamp=result.iso_timestamp)
