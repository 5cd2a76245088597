"""Market data ingestion: chart-result JSON and delimited text."""

from chart_trainer.data.ingest import MarketData, parse_stock_data, parse_chart_json, parse_csv, chart_title

__all__ = ["MarketData", "parse_stock_data", "parse_chart_json", "parse_csv", "chart_title"]
