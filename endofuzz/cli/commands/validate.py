from ..argtypes import rule_base_from

def cmd_validate(args):
    rb = rule_base_from(args)
    e = rb.engine
    print(f"OK: {rb.describe()}")
    print(f"tnorm={e.tnorm}, snorm={e.snorm}, threshold={e.threshold}, defuzz={e.defuzz}")
