"""ADIF field-name mapping shared by the decoder and encoder."""

from __future__ import annotations

# Encoder emits fields in this order.
FIELD_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("CALL", "callsign"),
    ("QSO_DATE", "date"),
    ("TIME_ON", "time_on"),
    ("TIME_OFF", "time_off"),
    ("FREQ", "frequency_mhz"),
    ("BAND", "band"),
    ("MODE", "mode"),
    ("RST_SENT", "rst_sent"),
    ("RST_RCVD", "rst_received"),
    ("NAME", "operator_name"),
    ("QTH", "location"),
    ("COUNTRY", "country"),
    ("GRIDSQUARE", "grid_square"),
    ("TX_PWR", "power_watts"),
    ("COMMENT", "comment"),
    ("QSL_RCVD", "confirmed"),
)

ATTRIBUTE_BY_FIELD: dict[str, str] = dict(FIELD_ATTRIBUTES)
