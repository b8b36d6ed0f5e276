"""Data input/output helpers (GPX/CSV files and export paths).

Utility modules here keep disk-level concerns isolated from the rest of the
application:
- :mod:`gpx_writer` serializes measurements to GPX 1.1.
- :mod:`gpx_reader` parses GPX tracks back into points.
- :mod:`csv_writer` emits the measurement table.
- :mod:`file_paths` centralises export folder and file naming.
- :mod:`exporter` ties them together for a finished session.
"""
