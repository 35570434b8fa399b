from .user import UserModel
from .doctor import (
    WEEKDAYS,
    DoctorModel,
    DoctorDetailsModel,
    DoctorEducationModel,
    DoctorRegistrationModel,
    DoctorWorkDayModel,
    ClinicModel,
)
from .appointment import AppointmentModel
from .catalog import CategoryModel, BrandModel, ManufacturerModel, MedicineModel
from .cart import CartItemModel, WishlistItemModel

__all__ = [
    "UserModel",
    "WEEKDAYS",
    "DoctorModel",
    "DoctorDetailsModel",
    "DoctorEducationModel",
    "DoctorRegistrationModel",
    "DoctorWorkDayModel",
    "ClinicModel",
    "AppointmentModel",
    "CategoryModel",
    "BrandModel",
    "ManufacturerModel",
    "MedicineModel",
    "CartItemModel",
    "WishlistItemModel",
]
