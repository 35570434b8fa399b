# pharmacare/db/models/catalog.py
from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, Date, ForeignKey
from sqlalchemy.orm import relationship
from pharmacare.db.base import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)


class BrandModel(Base):
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)


class ManufacturerModel(Base):
    __tablename__ = "manufacturers"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)


class MedicineModel(Base):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    expiry_date = Column(Date, nullable=True)
    prescription_required = Column(Boolean, nullable=False, default=False)
    stock_quantity = Column(Integer, nullable=False, default=0)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    brand_id = Column(Integer, ForeignKey("brands.id"), nullable=True, index=True)
    manufacturer_id = Column(Integer, ForeignKey("manufacturers.id"), nullable=True)

    category = relationship("CategoryModel")
    brand = relationship("BrandModel")
    manufacturer = relationship("ManufacturerModel")
