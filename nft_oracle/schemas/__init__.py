from nft_oracle.schemas.tokens import (
    TokenInput,
    IngestRequest,
    IngestResponse,
    SetOwnerRequest,
    SetOwnerResponse,
    TokenView,
    PreviousOwnerResponse,
    SupplyResponse,
    IndexReportResponse,
)
