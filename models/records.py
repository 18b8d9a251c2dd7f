from sqlalchemy import Column, Integer, String, Text, Date
from models.base import Base


class Customer(Base):
    """
    Individual records from the dump's customers file.

    Column names match the CSV header exactly, so consumers can query
    the table with the same names they see in the source file. Every
    data column is NOT NULL.
    """
    __tablename__ = "customers"

    # SQLite only auto-assigns INTEGER PRIMARY KEY (rowid alias)
    id = Column(Integer, primary_key=True, autoincrement=True)

    index = Column("Index", Integer, nullable=False)
    customer_id = Column("Customer Id", String(64), nullable=False)
    first_name = Column("First Name", String(255), nullable=False)
    last_name = Column("Last Name", String(255), nullable=False)
    company = Column("Company", String(255), nullable=False)
    city = Column("City", String(255), nullable=False)
    country = Column("Country", String(255), nullable=False)
    phone_1 = Column("Phone 1", String(64), nullable=False)
    phone_2 = Column("Phone 2", String(64), nullable=False)
    email = Column("Email", String(320), nullable=False)
    subscription_date = Column("Subscription Date", Date, nullable=False)
    website = Column("Website", String(2048), nullable=False)


class Organization(Base):
    """Organization records from the dump's organizations file."""
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, autoincrement=True)

    index = Column("Index", Integer, nullable=False)
    organization_id = Column("Organization Id", String(64), nullable=False)
    name = Column("Name", String(255), nullable=False)
    website = Column("Website", String(2048), nullable=False)
    country = Column("Country", String(255), nullable=False)
    description = Column("Description", Text, nullable=False)
    founded = Column("Founded", Integer, nullable=False)
    industry = Column("Industry", String(255), nullable=False)
    number_of_employees = Column("Number of employees", Integer, nullable=False)
