"""Serialized views of a document for export. Nothing here touches the store."""
import csv
import io

from drively.models.document import Document

CSV_HEADERS = [
    "Date",
    "Start Time",
    "End Time",
    "Duration (minutes)",
    "Night Drive",
    "Weather",
    "Skills Practiced",
    "Supervisor Name",
    "Supervisor Age",
]


def export_json(document: Document) -> str:
    """Full-document dump in the on-disk (camelCase) shape."""
    return document.to_json()


def export_drives_csv(document: Document) -> str:
    """
    One row per drive, every field quoted. An empty log yields the header row
    only.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for drive in document.drives:
        writer.writerow([
            drive.date.isoformat(),
            drive.start_time,
            drive.end_time,
            drive.duration,
            "Yes" if drive.is_night_drive else "No",
            drive.weather or "",
            drive.skills or "",
            drive.supervisor_name or "",
            drive.supervisor_age if drive.supervisor_age is not None else "",
        ])
    return buf.getvalue()
