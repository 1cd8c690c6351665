"""Application constants: status codes, spreadsheet layout and defaults."""

# Response status codes
HTTP_CODE_SUCCESS = 200
HTTP_CODE_REDIRECT = 302
HTTP_CODE_BAD_REQUEST = 400
HTTP_CODE_FORBIDDEN = 403
HTTP_CODE_UNPROCESSABLE_ENTITY = 422

# Routing
DEFAULT_PAGE = "home"
INDEX_PAGE = "Index"
PATIENT_DETAIL_PAGE = "PatientDetail"
PAGE_TITLE = "MD Portal"
CONTROLLER_SUFFIX = "Controller"

# Patient spreadsheet layout (1-based rows, column letters)
PATIENT_HEADER_LABELS = [
    "Patient Name:",
    "Phone:",
    "Gov Id:",
    "Patient Folder",
    "Patient e-Mail:",
]
PATIENT_NAME_ROW = 1
PATIENT_PHONE_ROW = 2
PATIENT_GOV_ID_ROW = 3
PATIENT_FOLDER_ROW = 4
PATIENT_EMAIL_ROW = 5
PATIENT_HEADER_RANGE = "A1:B5"

# Visit log: header at row 10, one visit per row from row 11, columns A-F
VISIT_LOG_HEADER_ROW = 10
VISIT_LOG_FIRST_ROW = 11
VISIT_LOG_FIRST_COLUMN = "A"
VISIT_LOG_LAST_COLUMN = "F"
VISIT_LOG_WIDTH = 6
VISIT_EVENT_COLUMN = "E"
VISIT_LOG_HEADERS = [
    "Date and Time of Appointment",
    "Notes of Visit",
    "Visit Amount",
    "Amount Paid",
    "Visits",
    "Diagnosis",
]
VISIT_NOTES_COLUMN_WIDTH = 300
VISIT_LOG_HEADER_BACKGROUND = {"red": 0.941, "green": 0.941, "blue": 0.941}  # #f0f0f0
DATE_TIME_NUMBER_FORMAT = "yyyy-mm-dd hh:mm"

# Master Index layout: data from row 2, columns A-F
MASTER_INDEX_FIRST_ROW = 2
MASTER_INDEX_FOLDER_COLUMN = "C"
MASTER_INDEX_DOCUMENT_COLUMN = "D"

# Placeholders written before the link formulas are installed
EVENT_PLACEHOLDER = "TEMP_EVENT_PLACEHOLDER"
FOLDER_PLACEHOLDER = "TEMP_FOLDER_PLACEHOLDER"
SHEET_PLACEHOLDER = "TEMP_SHEET_PLACEHOLDER"

# Link labels
FOLDER_LINK_LABEL = "View Folder"
SHEET_LINK_LABEL = "View Patient Sheet"
PATIENT_FOLDER_LINK_LABEL = "Open Patient Folder"
EVENT_LINK_LABEL = "View Event"

# Visits
PENDING_DIAGNOSIS = "Pending"
NOT_AVAILABLE = "N/A"

# Google API scopes needed by the three adapters
GOOGLE_API_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/calendar",
]
