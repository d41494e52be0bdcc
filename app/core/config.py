from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str

    # If DEV and you hit SSL cert issues on Windows, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    SUPER_ADMIN_EMAIL: str | None = None
    SUPER_ADMIN_PASSWORD: str | None = None
    SUPER_ADMIN_NAME: str | None = "Super Admin"
    ENV: str = "dev"  # "dev" or "prod"

    # --- SUPABASE STORAGE ---
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    DOCUMENTS_BUCKET: str = "documents"

    # --- PAYMENTS ---
    RAZORPAY_KEY_ID: str | None = None

    # --- PHONE VERIFICATION ---
    SMS_API_URL: str | None = None
    SMS_API_KEY: str | None = None
    SMS_SENDER_ID: str = "EXMREG"
    OTP_EXPIRE_MINUTES: int = 10

    # --- RATE LIMITING ---
    REDIS_URL: str | None = None

    # --- EMAIL SETTINGS ---
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 2525  # Default to Mailtrap port
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    EMAILS_FROM_EMAIL: str = "no-reply@examportal.gov.in"
    EMAILS_FROM_NAME: str = "Exam Registration Portal"
    FRONTEND_URL: str = "http://localhost:5173" # For login link

    # --- PDF ---
    WKHTMLTOPDF_PATH: str = "/usr/bin/wkhtmltopdf"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
