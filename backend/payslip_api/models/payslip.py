from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String, Text, UniqueConstraint

from payslip_api.db.session import Base

MONEY = Numeric(10, 2)


class Payslip(Base):
    __tablename__ = "payslips"
    __table_args__ = (
        UniqueConstraint("employee_id", "month_year", name="unique_employee_month_year"),
    )

    # PSL-<MONTHYEAR>-<nnn>; "PSL-SEPTEMBER2024-123" is 21 characters
    payslip_id = Column(String(32), primary_key=True)

    employee_id = Column(String(7), nullable=False, index=True)
    employee_name = Column(Text, nullable=False)
    employee_email = Column(Text, nullable=False)
    month_year = Column(String(20), nullable=False)
    designation = Column(Text, nullable=False)
    office_location = Column(Text, nullable=False)
    employment_type = Column(Text, nullable=False)
    date_of_joining = Column(Date, nullable=False)
    working_days = Column(Integer, nullable=False)

    bank_name = Column(Text, nullable=False)
    pan_no = Column(String(10), nullable=False)
    bank_account_no = Column(String(18), nullable=False)
    pf_no = Column(String(22), nullable=False)
    uan_no = Column(String(12), nullable=False)
    esic_no = Column(String(17), nullable=False)

    basic_salary = Column(MONEY, nullable=False)
    hra = Column(MONEY, nullable=False)
    other_allowance = Column(MONEY, nullable=False)
    professional_tax = Column(MONEY, nullable=False)
    tds = Column(MONEY, nullable=False)
    provident_fund = Column(MONEY, nullable=False)
    lwp = Column(MONEY, nullable=False)
    other_deduction = Column(MONEY, nullable=False, default=0)

    # Fixed at creation; there is no update path
    net_salary = Column(MONEY, nullable=False)
    status = Column(String(20), nullable=False, default="Generated")

    created_at = Column(DateTime, default=datetime.utcnow)
