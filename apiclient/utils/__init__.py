from apiclient.utils.payload_loader import get_logger, load_payloads_from_csv

__all__ = ["get_logger", "load_payloads_from_csv"]
