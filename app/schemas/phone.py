from pydantic import BaseModel, field_validator


class SendOtpRequest(BaseModel):
    mobile: str

    @field_validator("mobile")
    def ten_digits(cls, v: str):
        v = v.strip()
        if len(v) != 10 or not v.isdigit():
            raise ValueError("Please enter a valid 10-digit mobile number")
        return v


class VerifyOtpRequest(SendOtpRequest):
    code: str

    @field_validator("code")
    def six_digits(cls, v: str):
        v = v.strip()
        if len(v) != 6 or not v.isdigit():
            raise ValueError("Please enter the 6-digit verification code")
        return v
