"""
Constants — attempt log schema, bucket key format, and request header names.
"""

# Day bucket used as partition key (UTC)
BUCKET_KEY_FORMAT = "%Y%m%d"

# Date forms accepted by GET /logs in addition to full ISO-8601
ACCEPTED_DATE_FORMATS = ("%Y%m%d", "%Y-%m-%d")

# Attempt log columns
COL_PARTITION_KEY = "partition_key"
COL_ROW_KEY = "row_key"
COL_SUCCESS = "success"
COL_TIMESTAMP = "timestamp"
COL_PAYLOAD_ID = "payload_id"
COL_STATUS_CODE = "status_code"

# PostgreSQL unique_violation
PG_UNIQUE_VIOLATION = "23505"
# PostgREST: relation does not exist
PG_UNDEFINED_TABLE = "42P01"

PAYLOAD_CONTENT_TYPE = "text/plain; charset=utf-8"

# Function key pass-through
FUNCTION_KEY_HEADER = "x-functions-key"
FUNCTION_KEY_QUERY_PARAM = "code"

PUBLIC_API_SERVICE_NAME = "PublicAPI"
