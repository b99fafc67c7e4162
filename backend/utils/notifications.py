from twilio.rest import Client
from config import TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER
import logging

logger = logging.getLogger(__name__)


def send_sms(to_phone_number: str, body: str) -> bool:
    """Sends an SMS using Twilio."""
    if not all([TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER]):
        logger.error("Twilio settings are not fully configured. Cannot send SMS.")
        return False

    try:
        client = Client(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN)
        message = client.messages.create(
            body=body,
            from_=TWILIO_PHONE_NUMBER,
            to=to_phone_number
        )
        logger.info(f"SMS sent successfully to {to_phone_number}, SID: {message.sid}")
        return True
    except Exception as e:
        logger.error(f"Failed to send SMS to {to_phone_number}: {e}")
        return False


# SMS Templates
def get_verification_code_sms(code: str, expires_in_minutes: int) -> str:
    """Generate verification code SMS template"""
    return f"Your verification code is {code}. It expires in {expires_in_minutes} minutes."
