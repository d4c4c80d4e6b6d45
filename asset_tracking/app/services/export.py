"""
Export Functions for asset data.

Renders export records to CSV for spreadsheets and external analysis.
"""

import csv
import io
from typing import List

from asset_tracking.app.schemas.asset import ExportRecord

EXPORT_COLUMNS = list(ExportRecord.model_fields)


def export_records_csv(records: List[ExportRecord]) -> str:
    """
    Export records to CSV format.
    
    Args:
        records: Records from AssetRetrievalService.export_data()
        
    Returns:
        CSV string with a header row and one line per record.
        Empty fields are written as empty cells.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    
    # Write header
    writer.writerow(EXPORT_COLUMNS)
    
    # Write data rows
    for record in records:
        row = record.model_dump()
        writer.writerow([
            "" if row[column] is None else row[column]
            for column in EXPORT_COLUMNS
        ])
    
    return buffer.getvalue()
