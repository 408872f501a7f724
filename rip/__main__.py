from rip import cli_entry

cli_entry()
