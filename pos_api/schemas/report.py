from pydantic import BaseModel, Field


class TopProduct(BaseModel):
    name: str = ""
    qty_sold: int = 0


class ReportSummary(BaseModel):
    total_revenue: int = 0
    total_transactions: int = 0
    top_product: TopProduct = Field(default_factory=TopProduct)
