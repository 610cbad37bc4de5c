"""Thai user-facing message constants shared by routers and services."""


class DomainErrorMessages:
    """Default messages for the domain error hierarchy."""

    DOMAIN_ERROR: str = "เกิดข้อผิดพลาดในระบบ"
    AUTHENTICATION_FAILED: str = "ยืนยันตัวตนไม่สำเร็จ"
    PERMISSION_DENIED: str = "ไม่มีสิทธิ์เข้าถึง"
    NOT_FOUND: str = "ไม่พบข้อมูล"
    CONFLICT: str = "สถานะข้อมูลขัดแย้งกัน"


class AuthMessages:
    """Login gate messages."""

    INVALID_TEACHER_PASSWORD: str = "รหัสผ่านไม่ถูกต้อง"
    STUDENT_NOT_FOUND: str = "ไม่พบรหัสนักเรียน หรือ ระบบขัดข้อง"
    MISSING_TOKEN: str = "กรุณาเข้าสู่ระบบก่อน"
    INVALID_TOKEN: str = "โทเค็นไม่ถูกต้องหรือหมดอายุ"
    TEACHER_ONLY: str = "เฉพาะครูผู้สอนเท่านั้น"
    STUDENT_ONLY: str = "เฉพาะนักเรียนเท่านั้น"


class RosterMessages:
    """Roster store and class lookup messages."""

    STORE_UNAVAILABLE: str = "เชื่อมต่อ Google Sheets ไม่ได้ กรุณาลองใหม่อีกครั้ง"
    CLASS_NOT_FOUND: str = "ไม่พบรายวิชา {class_id}"
    STUDENT_NOT_ENROLLED: str = "ไม่พบข้อมูลสำหรับรหัสนี้ในรายวิชา {class_id}"
    SAVE_SUCCESS: str = "บันทึกข้อมูลเรียบร้อยแล้ว"
    SAVE_FAILED: str = "เกิดข้อผิดพลาดในการบันทึก หรือเชื่อมต่อ Google Sheets ไม่ได้"


class RedemptionMessages:
    """Lucky-draw ticket redemption prompts and notifications."""

    CONFIRM_PROMPT: str = (
        "ยืนยันการใช้สิทธิ์จับรางวัล?\n\n"
        "เมื่อกดแล้วตั๋วจะถูกใช้ไปและคุณจะได้สิทธิ์ในการจับรางวัลกับอาจารย์"
    )
    SUCCESS: str = "✅ บันทึกการใช้สิทธิ์สำเร็จ! \nแคปหน้าจอนี้เพื่อยืนยันสิทธิ์จับรางวัลกับอาจารย์"
    SAVE_REJECTED: str = (
        "❌ ไม่สามารถบันทึกข้อมูลได้ \n"
        "กรุณาแจ้งอาจารย์ให้ตรวจสอบว่าเพิ่มคอลัมน์ L (Redeemed) ใน Google Sheets แล้วหรือยัง"
    )
    CONNECTION_ERROR: str = "เกิดข้อผิดพลาดในการเชื่อมต่อ"
    CANCELLED: str = "ยกเลิกการใช้สิทธิ์แล้ว"
    NO_TICKETS: str = "ไม่มีตั๋วจับรางวัลคงเหลือ"
    IN_PROGRESS: str = "กำลังบันทึกการใช้สิทธิ์ กรุณารอสักครู่"
    INVALID_TRANSITION: str = "ลำดับขั้นตอนการใช้สิทธิ์ไม่ถูกต้อง"
