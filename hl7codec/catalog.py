"""
Starter catalog of concrete segment layouts.

Field positions follow the HL7 v2.x definitions. Because the wire text
is split on every field delimiter, MSH-1 (the field separator itself)
is not a field here: MSH index 1 holds the encoding characters, index 8
the message type, and so on.

DEFAULT_REGISTRY is populated once, when this module is imported.
"""

from .layout import Layout
from .registry import SegmentRegistry

ADMINISTRATIVE_SEX = {"", "F", "M", "O", "U", "A", "N"}
RESULT_STATUS = {"", "C", "D", "F", "I", "N", "O", "P", "R", "S", "U", "W", "X"}


def _one_of(allowed):
    return lambda value: value in allowed


def _layout(name, aliases, weight=None, has_children=False, validators=None):
    layout = Layout(name, weight=weight, has_children=has_children)
    validators = validators or {}
    for alias in aliases:
        layout.add_field(alias, validator=validators.get(alias))
    return layout


# Message Header
MSH = _layout(
    "MSH",
    [
        "enc_chars",
        "sending_app",
        "sending_facility",
        "recv_app",
        "recv_facility",
        "time",
        "security",
        "message_type",
        "message_control_id",
        "processing_id",
        "version_id",
        "seq",
        "continue_ptr",
        "accept_ack_type",
        "app_ack_type",
        "country_code",
        "charset",
    ],
    weight=-1,
)

# Event Type
EVN = _layout(
    "EVN",
    [
        "type_code",
        "recorded_date",
        "planned_date",
        "reason_code",
        "operator_id",
        "event_occurred",
    ],
    weight=0,
)

# Patient Identification
PID = _layout(
    "PID",
    [
        "set_id",
        "patient_id",
        "patient_id_list",
        "alt_patient_id",
        "patient_name",
        "mother_maiden_name",
        "patient_dob",
        "admin_sex",
        "patient_alias",
        "race",
        "address",
        "country_code",
        "phone_home",
        "phone_business",
        "primary_language",
        "marital_status",
        "religion",
        "account_number",
        "social_security_num",
        "driver_license_num",
        "mothers_id",
        "ethnic_group",
        "birthplace",
        "multi_birth",
        "birth_order",
        "citizenship",
        "vet_status",
        "nationality",
        "death_date",
        "death_indicator",
    ],
    weight=1,
    validators={"admin_sex": _one_of(ADMINISTRATIVE_SEX)},
)

# Patient Visit
PV1 = _layout(
    "PV1",
    [
        "set_id",
        "patient_class",
        "assigned_location",
        "admission_type",
        "preadmit_number",
        "prior_location",
        "attending_doctor",
        "referring_doctor",
        "consulting_doctor",
        "hospital_service",
        "temporary_location",
        "preadmit_test_indicator",
        "readmission_indicator",
        "admit_source",
        "ambulatory_status",
        "vip_indicator",
        "admitting_doctor",
        "patient_type",
        "visit_number",
        "financial_class",
    ],
    weight=2,
)

# Common Order
ORC = _layout(
    "ORC",
    [
        "order_control",
        "placer_order_number",
        "filler_order_number",
        "placer_group_number",
        "order_status",
        "response_flag",
        "quantity_timing",
        "parent",
        "transaction_date",
        "entered_by",
        "verified_by",
        "ordering_provider",
    ],
    weight=88,
)

# Observation Request; owns its OBX and NTE segments
OBR = _layout(
    "OBR",
    [
        "set_id",
        "placer_order_number",
        "filler_order_number",
        "universal_service_id",
        "priority",
        "requested_date",
        "observation_date",
        "observation_end_date",
        "collection_volume",
        "collector_identifier",
        "specimen_action_code",
        "danger_code",
        "relevant_clinical_info",
        "specimen_received_date",
        "specimen_source",
        "ordering_provider",
        "order_callback_phone_number",
        "placer_field_1",
        "placer_field_2",
        "filler_field_1",
        "filler_field_2",
        "results_status_change_date",
        "charge_to_practice",
        "diagnostic_serv_sect_id",
        "result_status",
    ],
    weight=89,
    has_children=True,
)

# Observation Result
OBX = _layout(
    "OBX",
    [
        "set_id",
        "value_type",
        "observation_id",
        "observation_sub_id",
        "observation_value",
        "units",
        "references_range",
        "abnormal_flags",
        "probability",
        "nature_of_abnormal_test",
        "observation_result_status",
        "effective_date_of_reference_range",
        "user_defined_access_checks",
        "observation_date",
        "producer_id",
        "responsible_observer",
        "observation_method",
    ],
    weight=90,
    validators={"observation_result_status": _one_of(RESULT_STATUS)},
)

# Notes and Comments
NTE = _layout(
    "NTE",
    ["set_id", "source", "comment", "comment_type"],
)

STANDARD_LAYOUTS = [MSH, EVN, PID, PV1, ORC, OBR, OBX, NTE]

DEFAULT_REGISTRY = SegmentRegistry(STANDARD_LAYOUTS)
