from django.utils.deprecation import MiddlewareMixin


class CurrentOwnerMiddleware(MiddlewareMixin):
    # Run on every request and attach a .owner attribute to the request.
    # Views hand request.owner to the services explicitly, the services
    # never look the user up themselves.
    def process_request(self, request):
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            request.owner = user
        else:
            # Unauthenticated users own nothing
            request.owner = None
