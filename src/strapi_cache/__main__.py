from strapi_cache.app import main

main()
