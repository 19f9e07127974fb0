from translation_desk.schemas.order import CamelModel


class RecentRequest(CamelModel):
    id: str
    customer_name: str
    source_language: str
    target_language: str
    status: str
    created_at: str


class StatsResponse(CamelModel):
    total_requests: int
    pending_requests: int
    in_progress_requests: int
    completed_requests: int
    recent_requests: list[RecentRequest]
    status_distribution: dict[str, int]
