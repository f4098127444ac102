from dataclasses import dataclass

from src.commerce.core.services import (
    DbSessionService,
    EmailSender,
    JwtGeneratorService,
    JwtVerificationService,
    ProductCascade,
)


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
    product_cascade: ProductCascade
    email_sender: EmailSender
