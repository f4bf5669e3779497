def last_call(context):
    """Return the whitespace-normalized query and parameters of the last ``run``."""
    args, kwargs = context.run.call_args
    query = args[0]
    parameters = args[1] if len(args) > 1 else kwargs.get("parameters")
    return " ".join(query.split()), parameters
