from django.core.validators import RegexValidator

# ---------- Field formats shared by models and forms ----------

# 2-digit state code, PAN (5 letters, 4 digits, 1 letter),
# entity number, literal Z, checksum character
GSTIN_REGEX = r"^\d{2}[A-Z]{5}\d{4}[A-Z][1-9A-Z]Z[0-9A-Z]$"

validate_gstin = RegexValidator(
    regex=GSTIN_REGEX, message="Invalid GST number", code="invalid_gstin")

validate_mobile = RegexValidator(
    regex=r"^[0-9]{10}$",
    message="Mobile number must be 10 digits",
    code="invalid_mobile",
)

validate_pincode = RegexValidator(
    regex=r"^[0-9]{6}$", message="Pincode must be 6 digits",
    code="invalid_pincode")

validate_hsn = RegexValidator(
    regex=r"^\d{4,8}$", message="HSN code must be 4 to 8 digits",
    code="invalid_hsn")

# Party's own challan reference printed on an invoice
validate_challan_ref = RegexValidator(
    regex=r"^[0-9-]{1,20}$",
    message="Invalid party challan number format",
    code="invalid_challan_ref",
)

validate_ifsc = RegexValidator(
    regex=r"^[A-Z]{4}0[A-Z0-9]{6}$", message="Invalid IFSC code",
    code="invalid_ifsc")

# Payment details
validate_cheque_no = RegexValidator(
    regex=r"^[A-Za-z0-9]{6,12}$",
    message="Invalid cheque number (6-12 characters)",
    code="invalid_cheque_no",
)

validate_bank_name = RegexValidator(
    regex=r"^[A-Za-z\s]{3,50}$",
    message="Invalid bank name (3-50 characters)",
    code="invalid_bank",
)

validate_upi_id = RegexValidator(
    regex=r"^[a-zA-Z0-9._-]{2,256}@[a-zA-Z]{2,64}$",
    message="Invalid UPI ID", code="invalid_upi_id")

validate_person_name = RegexValidator(
    regex=r"^[A-Za-z\s]{3,50}$",
    message="Invalid name (3-50 characters)",
    code="invalid_name",
)

validate_broker_name = RegexValidator(
    regex=r"^[A-Za-z\s]{0,50}$",
    message="Invalid broker name (0-50 characters)",
    code="invalid_broker_name",
)

validate_broker_phone = RegexValidator(
    regex=r"^[0-9]{0,10}$",
    message="Invalid phone number (up to 10 digits)",
    code="invalid_broker_phone",
)
