from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Sequence

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local, today_in
from .core.constants import BUSINESS_TIMEZONE, DEFAULT_NIK_DEPARTMENTS, MAX_UPLOAD_BYTES
from .database.connection import DBConfig, DatabaseConnection
from .departments.mysql_department_repository import MySQLDepartmentRepository
from .departments.service import DepartmentService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveQuotaRepository, MySQLLeaveRequestRepository
from .leave.notifications import NotificationService
from .leave.service import LeaveQuotaService, LeaveService
from .nik.mysql_nik_repository import MySQLNikConfigRepository
from .nik.service import NikService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.component_service import PayrollComponentService
from .payroll.mysql_component_repository import MySQLPayrollComponentRepository
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ExportService
from .salaries.mysql_salary_repository import MySQLSalaryRepository
from .salaries.service import SalaryService
from .sick_leave.mysql_sick_leave_repository import MySQLSickLeaveRepository
from .sick_leave.service import SickLeaveService
from .sick_leave.storage import LocalDocumentStorage
from .system.mysql_system_repository import MySQLSystemRepository
from .system.service import SystemService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    departments_repo: MySQLDepartmentRepository
    employees_repo: MySQLEmployeeRepository

    auth_service: AuthService
    user_service: UserService
    department_service: DepartmentService
    nik_service: NikService
    employee_service: EmployeeService
    salary_service: SalaryService
    payroll_component_service: PayrollComponentService
    payroll_service: PayrollService
    leave_service: LeaveService
    leave_quota_service: LeaveQuotaService
    notification_service: NotificationService
    sick_leave_service: SickLeaveService
    attendance_service: AttendanceService
    export_service: ExportService
    system_service: SystemService


def build_container(
    *,
    db_config: dict,
    timezone: str = BUSINESS_TIMEZONE,
    nik_default_departments: Sequence[str] = DEFAULT_NIK_DEPARTMENTS,
    upload_dir: str = "uploads",
    max_upload_bytes: int = MAX_UPLOAD_BYTES,
    environment: str = "development",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    now = partial(now_local, timezone)

    users_repo = MySQLUserRepository(conn)
    departments_repo = MySQLDepartmentRepository(conn)
    employees_repo = MySQLEmployeeRepository(conn)
    nik_repo = MySQLNikConfigRepository(conn)
    salaries_repo = MySQLSalaryRepository(conn)
    components_repo = MySQLPayrollComponentRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    leave_requests_repo = MySQLLeaveRequestRepository(conn)
    leave_quotas_repo = MySQLLeaveQuotaRepository(conn)
    sick_leaves_repo = MySQLSickLeaveRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    nik_service = NikService(nik_repo, departments_repo, default_departments=nik_default_departments, now=now)

    return Container(
        conn=conn,
        users_repo=users_repo,
        departments_repo=departments_repo,
        employees_repo=employees_repo,
        auth_service=AuthService(users_repo, employees_repo, now=now),
        user_service=UserService(users_repo),
        department_service=DepartmentService(departments_repo),
        nik_service=nik_service,
        employee_service=EmployeeService(employees_repo, departments_repo, nik_service, now=now),
        salary_service=SalaryService(salaries_repo, employees_repo),
        payroll_component_service=PayrollComponentService(components_repo),
        payroll_service=PayrollService(
            payrolls_repo,
            components_repo,
            salaries_repo,
            employees_repo,
            calculator=StandardPayrollCalculator(),
            now=now,
        ),
        leave_service=LeaveService(
            leave_requests_repo,
            leave_quotas_repo,
            employees_repo,
            timezone=timezone,
            today=partial(today_in, timezone),
            now=now,
        ),
        leave_quota_service=LeaveQuotaService(leave_quotas_repo, employees_repo),
        notification_service=NotificationService(leave_requests_repo, sick_leaves_repo),
        sick_leave_service=SickLeaveService(
            sick_leaves_repo,
            employees_repo,
            LocalDocumentStorage(upload_dir, max_bytes=max_upload_bytes),
            now=now,
        ),
        attendance_service=AttendanceService(attendance_repo),
        export_service=ExportService(MySQLReportRepository(conn)),
        system_service=SystemService(MySQLSystemRepository(conn), environment=environment, now=now),
    )
