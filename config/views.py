from django.db import connection
from django.http import JsonResponse


def health_check(request):
    """Liveness probe: the process is up and the database answers."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
    except Exception:
        return JsonResponse({'status': 'unhealthy', 'database': 'unavailable'}, status=503)
    return JsonResponse({'status': 'ok', 'database': 'ok'})


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'success': False,
        'status': 'fail',
        'message': 'Not found',
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'success': False,
        'status': 'error',
        'message': 'Internal server error',
    }, status=500)
