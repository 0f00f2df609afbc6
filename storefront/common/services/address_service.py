from typing import Dict, List
from uuid import uuid4

from ..db.session import SessionFactory
from ..models.address import Address
from ..utils.dto import to_address_dto
from ..utils.validators import missing_fields

REQUIRED = ("firstName", "lastName", "email", "phone", "addressLine1", "city", "state", "postalCode", "country")
EDITABLE = {
    "name": "name",
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "addressLine1": "address_line1",
    "addressLine2": "address_line2",
    "city": "city",
    "state": "state",
    "postalCode": "postal_code",
    "country": "country",
}


class AddressService:
    """Saved shipping addresses per account.

    At most one address per user is the default. The first address saved
    becomes the default, and deleting the default promotes the oldest one left.
    """

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    @staticmethod
    def _owned(session, user_id: str):
        return session.query(Address).filter(Address.user_id == user_id)

    def _find(self, session, user_id: str, address_id: str) -> Address:
        row = self._owned(session, user_id).filter(Address.id == address_id).first()
        if row is None:
            raise LookupError("address not found")
        return row

    def _make_default(self, session, user_id: str, row: Address) -> None:
        for other in self._owned(session, user_id).filter(Address.is_default.is_(True)).all():
            if other.id != row.id:
                other.is_default = False
        row.is_default = True

    def list_addresses(self, *, user_id: str) -> List[Dict]:
        with self._session_factory() as session:
            rows = self._owned(session, user_id).order_by(Address.is_default.desc(), Address.created_at).all()
            return [to_address_dto(r) for r in rows]

    def add_address(self, *, user_id: str, data: Dict) -> Dict:
        data = data or {}
        missing = missing_fields(data, REQUIRED)
        if missing:
            raise ValueError(f"missing address fields: {', '.join(missing)}")
        with self._session_factory() as session:
            first = self._owned(session, user_id).count() == 0
            row = Address(
                id=str(uuid4()),
                user_id=user_id,
                name=data.get("name") or f"{data['firstName']} {data['lastName']}",
                first_name=data["firstName"],
                last_name=data["lastName"],
                email=data["email"],
                phone=data["phone"],
                address_line1=data["addressLine1"],
                address_line2=data.get("addressLine2") or "",
                city=data["city"],
                state=data["state"],
                postal_code=data["postalCode"],
                country=data["country"],
                is_default=False,
            )
            session.add(row)
            if first or data.get("isDefault"):
                self._make_default(session, user_id, row)
            session.flush()
            return to_address_dto(row)

    def update_address(self, *, user_id: str, address_id: str, data: Dict) -> Dict:
        """Partial update; required fields cannot be blanked."""
        data = data or {}
        blanked = missing_fields(data, [k for k in REQUIRED if k in data])
        if blanked:
            raise ValueError(f"missing address fields: {', '.join(blanked)}")
        with self._session_factory() as session:
            row = self._find(session, user_id, address_id)
            for key, attr in EDITABLE.items():
                if key in data:
                    setattr(row, attr, str(data.get(key) or "").strip())
            if data.get("isDefault"):
                self._make_default(session, user_id, row)
            session.flush()
            return to_address_dto(row)

    def set_default(self, *, user_id: str, address_id: str) -> Dict:
        with self._session_factory() as session:
            row = self._find(session, user_id, address_id)
            self._make_default(session, user_id, row)
            session.flush()
            return to_address_dto(row)

    def delete_address(self, *, user_id: str, address_id: str) -> bool:
        with self._session_factory() as session:
            row = self._owned(session, user_id).filter(Address.id == address_id).first()
            if row is None:
                return False
            was_default = bool(row.is_default)
            session.delete(row)
            session.flush()
            if was_default:
                heir = self._owned(session, user_id).order_by(Address.created_at).first()
                if heir is not None:
                    heir.is_default = True
            return True
