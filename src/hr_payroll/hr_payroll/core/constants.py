"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

BUSINESS_TIMEZONE = "Asia/Jakarta"

# NIK
DEFAULT_NIK_DEPARTMENTS = ("General", "Operational")
DEFAULT_SEQUENCE_LENGTH = 3
DEFAULT_FORMAT_PATTERN = "PREFIX + SEQUENCE"
FALLBACK_NIK_PREFIX = "EMP"
FALLBACK_NIK_DIGITS = 6
FALLBACK_NIK_RETRY_DIGITS = 8

# Leave
ANNUAL_LEAVE_TYPE = "tahunan"
SICK_REASON = "Sakit"

# Employees / bulk import
DEFAULT_IMPORT_DEPARTMENT = "Operational"
DEPARTMENT_ALIASES = {"operasional": "operational"}

# Uploads
MAX_UPLOAD_BYTES = 2 * 1024 * 1024
ALLOWED_UPLOAD_EXTENSIONS = ("jpg", "jpeg", "png")

# Payroll component names used by the payroll creation fallback.
COMPANY_BPJS_COMPONENTS = {
    "bpjs_health_company": "BPJS Kesehatan (Perusahaan)",
    "jht_company": "BPJS Ketenagakerjaan JHT (Perusahaan)",
    "jkk_company": "BPJS Ketenagakerjaan JKK (Perusahaan)",
    "jkm_company": "BPJS Ketenagakerjaan JKM (Perusahaan)",
    "jp_company": "BPJS Jaminan Pensiun (Perusahaan)",
}
EMPLOYEE_BPJS_COMPONENTS = {
    "bpjs_health_employee": "BPJS Kesehatan (Karyawan)",
    "jht_employee": "BPJS Ketenagakerjaan JHT (Karyawan)",
    "jp_employee": "BPJS Jaminan Pensiun (Karyawan)",
}
ALLOWANCE_FIELDS = (
    "position_allowance",
    "management_allowance",
    "phone_allowance",
    "incentive_allowance",
    "overtime_allowance",
)
MANUAL_DEDUCTION_FIELDS = ("kasbon", "telat", "angsuran_kredit")

# Export
EXPORT_SHEET_NAME = "Report"
EXPORT_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
