# errors.py
"""
Application error types and the single code -> message translation table.

Services raise these; main.py turns them into JSON responses of the form
{"error": {"code": ..., "message": ...}} with the class's HTTP status.
"""
from typing import Optional


ERROR_MESSAGES = {
     # Connectivity
     "unavailable": "Sunucu bağlantısı kurulamadı. İnternet bağlantınızı kontrol edin",
     "auth/network-request-failed": "İnternet bağlantısı yok. Lütfen bağlantınızı kontrol edin.",

     # Authentication
     "auth/email-already-in-use": "Bu e-posta adresi zaten kullanımda",
     "auth/invalid-email": "Geçersiz e-posta adresi",
     "auth/weak-password": "Şifre çok zayıf",
     "auth/user-disabled": "Bu hesap devre dışı bırakılmış",
     "auth/user-not-found": "Kullanıcı bulunamadı",
     "auth/wrong-password": "Hatalı şifre",
     "auth/invalid-token": "Oturum geçersiz veya süresi dolmuş",
     "auth/missing-token": "Oturum açmanız gerekiyor",
     "auth/session-closed": "Oturum kapatıldı",

     # Authorization
     "permission-denied": "Bu işlem için yetkiniz bulunmuyor",
     "users/manager-required": "Bu işlem için yönetici yetkisi gerekiyor",
     "users/cannot-delete-self": "Kendinizi silemezsiniz",
     "comments/not-allowed": "Bu arızaya yorum yapma yetkiniz yok",

     # Not found
     "not-found": "İstenen kayıt bulunamadı",

     # Validation
     "validation/password-too-short": "Şifre en az 6 karakter olmalıdır",
     "validation/password-mismatch": "Şifreler eşleşmiyor",
     "validation/site-required": "Lütfen en az bir saha seçin",
     "validation/required-field": "Lütfen tüm alanları doldurun",
     "validation/resolution-description-required": "Lütfen çözüm açıklaması girin",
     "validation/comment-empty": "Yorum boş olamaz",
     "validation/invalid-assignee": "Atanan kişi tekniker veya mühendis olmalıdır",
     "validation/invalid-role": "Geçersiz kullanıcı rolü",
     "validation/invalid-date-range": "Geçersiz tarih aralığı",
     "validation/photo-index": "Fotoğraf bulunamadı",

     # Fault lifecycle
     "fault/already-resolved": "Bu arıza zaten çözüldü olarak işaretlenmiş",
     "fault/resolution-invariant": "Çözüm bilgisi ile arıza durumu uyumsuz",
     "fault/no-resolution": "Bu arızaya ait çözüm kaydı yok",

     # Duty checks
     "duty/outside-slot": "Şu an kontrol saati değil",

     # Storage
     "storage/unauthorized": "Dosya yükleme yetkisi yok",
     "storage/upload-failed": "Dosya yükleme hatası",
     "storage/object-not-found": "Dosya bulunamadı",
}

DEFAULT_MESSAGE = "Beklenmeyen bir hata oluştu"


def message_for(code: str) -> str:
     """Return the user-facing message for an error code."""
     return ERROR_MESSAGES.get(code, DEFAULT_MESSAGE)


class AppError(Exception):
     """Base class for errors surfaced to API clients."""

     status_code = 400
     default_code = "error"

     def __init__(self, code: Optional[str] = None, message: Optional[str] = None):
          self.code = code or self.default_code
          self.message = message or message_for(self.code)
          super().__init__(self.message)

     def to_dict(self) -> dict:
          return {"error": {"code": self.code, "message": self.message}}


class ConnectivityError(AppError):
     status_code = 503
     default_code = "unavailable"


class AuthenticationError(AppError):
     status_code = 401
     default_code = "auth/invalid-token"


class AuthorizationError(AppError):
     status_code = 403
     default_code = "permission-denied"


class NotFoundError(AppError):
     status_code = 404
     default_code = "not-found"


class ConflictError(AppError):
     status_code = 409
     default_code = "auth/email-already-in-use"


class ValidationError(AppError):
     status_code = 422
     default_code = "validation/required-field"


class StorageError(AppError):
     status_code = 502
     default_code = "storage/upload-failed"
