"""
Flow engine module.

Stage catalogue, transition table and the trampoline that drives the
presentation flow: master -> first_time / continuation / abort, with the
continuation stage looping on itself and routing back to master on delete.
"""
