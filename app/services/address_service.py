# app/services/address_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.address import AddressModel
from app.domain.errors import ConflictError, NotFoundError
from app.domain.schemas import AddressIn, AddressOut, AddressUpdate
from app.repos.address_repo import AddressRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    """
    Delivery address of the logged user. One per user, always addressed
    through the caller id, never through an address id from the client.
    """

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)

    def create_address(self, user_id: int, payload: AddressIn) -> AddressOut:
        if self.repo.get_by_user(user_id):
            raise ConflictError("User already has an address on record.")

        try:
            address = self.repo.create_address(AddressModel(user_id=user_id, **payload.model_dump()))
        except IntegrityError:
            # concurrent create hit the unique user_id
            self.repo.rollback()
            raise ConflictError("User already has an address on record.") from None

        logger.info(f"Address {address.id} created for user {user_id}")
        return AddressOut.model_validate(address)

    def get_address(self, user_id: int) -> AddressOut:
        return AddressOut.model_validate(self._get_or_404(user_id))

    def update_address(self, user_id: int, payload: AddressUpdate) -> AddressOut:
        address = self._get_or_404(user_id)

        for field, value in payload.model_dump(exclude_none=True).items():
            setattr(address, field, value)

        return AddressOut.model_validate(self.repo.save(address))

    def delete_address(self, user_id: int) -> None:
        address = self._get_or_404(user_id)
        self.repo.delete_address(address)
        logger.info(f"Address of user {user_id} deleted")

    def _get_or_404(self, user_id: int) -> AddressModel:
        address = self.repo.get_by_user(user_id)
        if not address:
            raise NotFoundError("Address not found.")
        return address
