"""
sitecost_modules -- domain records and stateful workflows of the dashboard.

Subpackages:
    project   -- clients, projects, jobs, tasks, cost records, progress and
                 cost selectors
    payroll   -- employees, time cards, snapshot edits and the timesheet service
    billing   -- quotation and invoice builders and the billing service

Also ``reference`` (the YAML reference-data store).

Importing this package must stay free of engine imports: the engines read
the record types defined here.
"""
