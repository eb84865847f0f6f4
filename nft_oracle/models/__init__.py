from nft_oracle.models.token_record import TokenRecord
from nft_oracle.models.index_entries import OwnerIndexEntry, IssuerIndexEntry
from nft_oracle.models.token_history import TokenHistory
from nft_oracle.models.audit_log import AuditLogRecord
