# utils/payload_loader.py - read JSON request payloads from a delimited file
import csv
import json
import logging

from apiclient.exceptions import PayloadEncodingError
from apiclient.helpers import must_payload

PAYLOAD_COLUMNS = ("Sample_Request", "SampleRequest", "Sample")


def get_logger(name: str = "api-tests"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


logger = get_logger(__name__)


def _payload_cell(row, column):
    if column is not None:
        return row.get(column)
    for name in PAYLOAD_COLUMNS:
        if row.get(name):
            return row[name]
    return None


def load_payloads_from_csv(csv_path, column=None, delimiter='\t'):
    """
    Read one test case per row of ``csv_path``.

    Each entry is ``{"TestCaseID", "row", "payload"}`` where ``payload`` is
    a Payload built from the JSON cell, or None when the cell is empty or
    does not hold valid JSON.
    """
    rows = []
    with open(csv_path, newline='', encoding='utf-8') as fh:
        reader = csv.DictReader(fh, delimiter=delimiter)
        for r in reader:
            case_id = r.get('ID') or r.get('TestCaseID') or ''
            sample = _payload_cell(r, column)
            payload = None
            if sample:
                try:
                    payload = must_payload(json.loads(sample))
                except (ValueError, PayloadEncodingError) as exc:
                    logger.warning("Skipping payload for test case %r: %s", case_id, exc)
            rows.append({
                'TestCaseID': case_id,
                'row': r,
                'payload': payload,
            })
    logger.info("Loaded %d test case(s) from %s", len(rows), csv_path)
    return rows
